"""
Request Context Middleware.

Every request gets a correlation ID, taken from X-Request-ID when the
client sends one and generated otherwise. It is bound to the structlog
context with the client name, method and path, echoed back in the
response headers, and stored on request.state for the error handlers.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from second_brain.backend.core.logging import get_logger

logger = get_logger(__name__)

KNOWN_FRONTENDS = frozenset({"web", "cli", "mobile", "api", "internal"})


def resolve_frontend(header_value: str | None) -> str:
    """X-Frontend-ID, lower-cased; "unknown" when missing or unrecognised."""
    frontend = (header_value or "").strip().lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.frontend = resolve_frontend(request.headers.get("X-Frontend-ID"))
        started = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=request.state.frontend,
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                extra={"error_type": type(exc).__name__, "duration_ms": _since(started)},
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = _since(started)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        logger.debug(
            "Request completed",
            extra={"status_code": response.status_code, "duration_ms": duration_ms},
        )
        return response


def _since(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
