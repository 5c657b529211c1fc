"""
Second Brain API.

Run with uvicorn:
    uvicorn second_brain.backend.main:app

The module-level `app` is built lazily on first attribute access, so the
package can be imported (by tests, migrations, the CLI) without config files.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from second_brain.backend.api import health
from second_brain.backend.api.v1 import router as api_v1_router
from second_brain.backend.core.config import get_app_config
from second_brain.backend.core.database import dispose_engine
from second_brain.backend.core.exception_handlers import register_exception_handlers
from second_brain.backend.core.logging import get_logger, setup_logging
from second_brain.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config = get_app_config()
    setup_logging()
    logger.info(
        "Application starting",
        extra={
            "app_name": config.application.name,
            "env": config.application.environment,
            "api_prefix": config.application.api_prefix,
        },
    )
    try:
        yield
    finally:
        await dispose_engine()
        logger.info("Application stopped")


def _add_middleware(app: FastAPI, origins: list[str]) -> None:
    # Starlette runs the last-added middleware first, so CORS wraps the request context.
    app.add_middleware(RequestContextMiddleware)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "X-Request-ID", "X-Frontend-ID"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )


def create_app() -> FastAPI:
    """Build the app from application.yaml: docs only in debug, API under api_prefix."""
    settings = get_app_config().application
    docs = settings.debug

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        lifespan=lifespan,
    )
    _add_middleware(app, settings.cors.origins)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
