"""
Application Exceptions.

Services raise these; exception_handlers maps each class to an HTTP
status and renders the error envelope. `code` is the stable,
machine-readable identifier clients switch on.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "SYS_INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """
    The record does not exist, or belongs to someone else.

    Both cases produce the same error so ownership cannot be probed.
    """

    code = "RES_NOT_FOUND"
    default_message = "Resource not found"


class ValidationError(ApplicationError):
    """A business rule rejected otherwise well-formed input."""

    code = "VAL_VALIDATION_ERROR"
    default_message = "Validation failed"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class BadRequestError(ApplicationError):
    """A required parameter is missing or unusable."""

    code = "REQ_BAD_REQUEST"
    default_message = "Bad request"


class AuthenticationError(ApplicationError):
    code = "AUTH_UNAUTHORIZED"
    default_message = "Authentication required"


class ConflictError(ApplicationError):
    code = "RES_CONFLICT"
    default_message = "Resource conflict"


class DatabaseError(ApplicationError):
    """The store failed; the message names the operation, never the driver error."""

    code = "SYS_DATABASE_ERROR"
    default_message = "Database error"
