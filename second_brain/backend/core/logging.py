"""
Centralized Logging Configuration.

Every module logs through structlog on top of the stdlib logging tree,
configured once from config/settings/logging.yaml.

JSON records carry: timestamp, level, logger, event, func_name, lineno,
plus whatever is bound to the structlog context. Inside an HTTP request
the middleware binds request_id, frontend, method and path; the auth
dependency adds user_id.

Usage:
    from second_brain.backend.core.logging import get_logger, setup_logging

    setup_logging()                      # values from logging.yaml
    setup_logging(level="DEBUG", format_type="console")

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from second_brain.backend.core.config import find_project_root, get_app_config
from second_brain.backend.core.config_schema import FileHandlerSchema, LoggingSchema


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, pre_chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _resolve_log_path(configured_path: str) -> Path:
    """Log file paths in logging.yaml are relative to the project root."""
    return find_project_root() / configured_path


def _file_handler(file_config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(file_config.path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
    config: LoggingSchema | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Keyword arguments override the matching logging.yaml values. Calling
    this again replaces the handlers installed by the previous call.

    Args:
        level: Log level name, e.g. "DEBUG"
        format_type: "json" or "console" (console output only; files are always JSON)
        enable_console: Write to stdout
        enable_file_logging: Write JSON lines to the rotating log file
        config: Logging settings to use instead of the loaded logging.yaml
    """
    config = config or get_app_config().logging
    level_name = (level or config.level).upper()
    renderer_name = format_type or config.format
    console_on = config.handlers.console.enabled if enable_console is None else enable_console
    file_on = config.handlers.file.enabled if enable_file_logging is None else enable_file_logging

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), processors)
    if renderer_name == "console":
        console_formatter = _formatter(structlog.dev.ConsoleRenderer(colors=True), processors)
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    if console_on:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)
    if file_on:
        root_logger.addHandler(_file_handler(config.handlers.file, json_formatter))

    for name, quiet_level in config.quiet_loggers.items():
        logging.getLogger(name).setLevel(getattr(logging, quiet_level.upper()))


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
