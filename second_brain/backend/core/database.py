"""
Database Engine and Sessions.

One async SQLAlchemy engine per process, created on first use so that
importing the app never needs database settings. Requests get a session
through the get_db_session dependency; the session commits when the
handler returns and rolls back when it raises.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from second_brain.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    """Pool settings from database.yaml. SQLite URLs keep SQLAlchemy's defaults."""
    from second_brain.backend.core.config import get_app_config

    db_config = get_app_config().database
    options: dict[str, Any] = {"echo": db_config.echo}
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            pool_pre_ping=True,
        )
    return options


def get_engine() -> AsyncEngine:
    """The process-wide engine, created on first call."""
    global _engine
    if _engine is None:
        from second_brain.backend.core.config import get_database_url

        url = get_database_url()
        _engine = create_async_engine(url, **_engine_options(url))
        logger.debug("Database engine created", extra={"backend": _engine.dialect.name})
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to get_engine(); objects stay usable after commit."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a request-scoped session.

    Usage in endpoints:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine. No-op if never created."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.debug("Database engine disposed")
    _engine = None
    _async_session_factory = None
