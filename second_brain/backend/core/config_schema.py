"""
Configuration Schemas.

One strict pydantic model per file in config/settings/. AppConfig
validates every file against its model when it is first loaded, so a
typo, a missing key or an out-of-range number fails at startup with the
file name in the message.

    application.yaml -> ApplicationSchema
    database.yaml    -> DatabaseSchema
    logging.yaml     -> LoggingSchema
    features.yaml    -> FeaturesSchema
    security.yaml    -> SecuritySchema

Secrets are never part of these files; see config.Settings.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Port = Field(ge=1, le=65535)


class _StrictBase(BaseModel):
    """Unknown keys are an error, not silently ignored."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int = Port


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    """Seconds."""

    database: float = Field(gt=0)
    external_api: float = Field(gt=0)


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: Literal["development", "test", "staging", "production"]
    debug: bool
    api_prefix: str = Field(pattern=r"^/")
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    """
    PostgreSQL connection settings.

    An empty host or name means no database is configured; the readiness
    probe reports that instead of failing.
    """

    host: str
    port: int = Port
    name: str
    user: str
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: int = Field(ge=1)
    pool_recycle: int
    echo: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: LogLevel
    format: Literal["json", "console"]
    handlers: HandlersSchema
    # third-party loggers held at a higher level than the root
    quiet_loggers: dict[str, LogLevel] = Field(default_factory=dict)


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    """Verification settings for bearer tokens issued by the identity provider."""

    algorithm: Literal["HS256", "HS384", "HS512"]
    access_token_expire_minutes: int = Field(gt=0)
    audience: str


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
