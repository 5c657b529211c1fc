"""
Alembic environment for the notes and tasks schema.

The URL comes from the application config (DATABASE_URL, or database.yaml
plus DB_PASSWORD), never from alembic.ini.

    alembic upgrade head          apply against the configured database
    alembic upgrade head --sql    print the DDL instead
"""

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from second_brain.backend.core import config as app_config
from second_brain.backend.models import Base

alembic_config = context.config
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

COMPARE_OPTIONS: dict[str, Any] = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def get_database_url() -> str:
    try:
        return app_config.get_database_url()
    except (FileNotFoundError, ValueError) as e:
        raise RuntimeError(
            "No database configured: set DATABASE_URL, or provide "
            "config/settings/database.yaml and DB_PASSWORD."
        ) from e


def _run(connection: Connection) -> None:
    context.configure(connection=connection, **COMPARE_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(get_database_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    context.configure(
        url=get_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    asyncio.run(_run_online())
