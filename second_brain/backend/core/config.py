"""
Configuration Management.

Two sources, both located from the project root (.project_root marker):

    config/.env              - secrets, read by pydantic-settings
    config/settings/*.yaml   - everything else, validated by config_schema

Environment variables win over config/.env. Nothing else in the code
base reads os.environ for settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from second_brain.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)

PROJECT_MARKER = ".project_root"


def find_project_root() -> Path:
    """Walk up from the working directory to the first folder holding the marker file."""
    for candidate in (Path.cwd(), *Path.cwd().parents):
        if (candidate / PROJECT_MARKER).exists():
            return candidate
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def validate_project_root() -> Path:
    """
    find_project_root for entry scripts.

    Exits with a readable message instead of a traceback.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read one file from config/settings/. An empty file yields {}."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """
    Secrets. Only passwords, keys and full connection strings belong here.

    DATABASE_URL, when set, replaces the URL assembled from database.yaml.
    """

    db_password: str
    jwt_secret: str
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    try:
        return schema_cls(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    Validated contents of config/settings/, one attribute per file.

    Loading fails fast with ValueError naming the offending file.
    """

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    security: SecuritySchema

    _files: dict[str, tuple[type[BaseModel], str]] = {
        "application": (ApplicationSchema, "application.yaml"),
        "database": (DatabaseSchema, "database.yaml"),
        "logging": (LoggingSchema, "logging.yaml"),
        "features": (FeaturesSchema, "features.yaml"),
        "security": (SecuritySchema, "security.yaml"),
    }

    def __init__(self) -> None:
        for attribute, (schema_cls, filename) in self._files.items():
            setattr(self, attribute, _load_validated(schema_cls, filename))


@lru_cache
def get_settings() -> Settings:
    """Cached secrets; config/.env is optional when the environment provides them."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path) if env_path.exists() else None)


@lru_cache
def get_app_config() -> AppConfig:
    """Cached application configuration."""
    return AppConfig()


def _with_driver(url: str, async_driver: bool) -> str:
    scheme, sep, rest = url.partition("://")
    if scheme in ("postgres", "postgresql", "postgresql+asyncpg"):
        scheme = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{scheme}{sep}{rest}"


def get_database_url(async_driver: bool = True) -> str:
    """
    Database URL for SQLAlchemy.

    Args:
        async_driver: asyncpg scheme for the app, plain postgresql for sync tools.
    """
    settings = get_settings()
    if settings.database_url:
        return _with_driver(settings.database_url, async_driver)

    db = get_app_config().database
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return f"{driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> tuple[str, float]:
    """(base URL, timeout in seconds) for talking to a running server."""
    app = get_app_config().application
    return f"http://{app.server.host}:{app.server.port}", float(app.timeouts.external_api)
