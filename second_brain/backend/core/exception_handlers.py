"""
Exception Handlers.

Turn every failure that escapes an endpoint into the standard error
envelope: {"success": false, "data": null, "error": {...}, "metadata": {...}}.

    ApplicationError subclasses -> status from EXCEPTION_STATUS_MAP
    RequestValidationError      -> 400 VAL_REQUEST_INVALID
    anything else               -> 500 SYS_INTERNAL_ERROR

Usage:
    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from second_brain.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from second_brain.backend.core.logging import get_logger
from second_brain.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    BadRequestError: 400,
    AuthenticationError: 401,
    ConflictError: 409,
    DatabaseError: 500,
}


def _get_request_id(request: Request) -> str | None:
    """Request ID set by the middleware, else whatever the client sent."""
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return request.headers.get("x-request-id")


def _detailed_errors_enabled() -> bool:
    from second_brain.backend.core.config import get_app_config

    return get_app_config().features.api_detailed_errors


def _error_response(
    request: Request,
    status_code: int,
    error: ErrorDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=error, metadata=ResponseMetadata(request_id=_get_request_id(request)))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


def _violations(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic errors; body fields are named without the "body." prefix."""
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in errors
    ]


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Server error" if status_code >= 500 else "Client error",
        extra={
            "code": exc.code,
            "message": exc.message,
            "status": status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )

    error = ErrorDetail(code=exc.code, message=exc.message)
    if isinstance(exc, ValidationError) and exc.details:
        error.details = exc.details

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return _error_response(request, status_code, error, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Report every invalid field at once.

    The message joins "field: reason" pairs; details.validation_errors
    keeps them itemised for clients that want to highlight fields.
    """
    violations = _violations(exc.errors())
    message = ", ".join(
        f"{v['field']}: {v['message']}" if v["field"] else v["message"] for v in violations
    )
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "error_count": len(violations)},
    )

    error = ErrorDetail(
        code="VAL_REQUEST_INVALID",
        message=message or "Request validation failed",
        details={"validation_errors": violations},
    )
    return _error_response(request, 400, error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Generic 500. The exception type is exposed only with api_detailed_errors on."""
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )

    error = ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred")
    if _detailed_errors_enabled():
        error.details = {"exception_type": type(exc).__name__}
    return _error_response(request, 500, error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
