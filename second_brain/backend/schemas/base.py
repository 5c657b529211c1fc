"""
Response Envelopes.

Every JSON body the API returns has the same four top-level keys:

    success   true unless an error occurred
    data      the payload (null on error)
    error     {code, message, details} (null on success)
    metadata  {timestamp, request_id}

List endpoints add a fifth, `pagination`.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field

from second_brain.backend.core.utils import utc_now

DataT = TypeVar("DataT")


def current_request_id() -> str | None:
    """Request ID bound to the structlog context by RequestContextMiddleware."""
    return structlog.contextvars.get_contextvars().get("request_id")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = Field(default_factory=current_request_id)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    model_config = ConfigDict(from_attributes=True)

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ErrorResponse(BaseModel):
    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(BaseModel):
    total: int
    limit: int
    page: int
    total_pages: int
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[DataT]):
    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo


class CountBucket(BaseModel):
    """One group of a group-and-count aggregation; key is null for the unset group."""

    key: str | None
    count: int


class DeletedResponse(BaseModel):
    id: str
    deleted: bool = True
