"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from dataclasses import dataclass
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.database import get_db_session
from second_brain.backend.core.exceptions import AuthenticationError
from second_brain.backend.core.security import decode_token

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_request_id(request: Request) -> str:
    """
    The correlation ID RequestContextMiddleware assigned to this request.

    Falls back to the X-Request-ID header, then a fresh UUID, when the
    middleware is not installed.
    """
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    return request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller, resolved once per request."""

    id: str
    email: str | None = None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CurrentUser:
    """
    Resolve the bearer token on the request to a user identity.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authentication required")

    payload = decode_token(credentials.credentials)
    user = CurrentUser(id=str(payload["sub"]), email=payload.get("email"))
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


AuthUser = Annotated[CurrentUser, Depends(get_current_user)]
