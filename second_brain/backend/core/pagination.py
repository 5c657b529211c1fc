"""
Page-number pagination for the list endpoints.

Pages are 1-indexed; page N of size L starts after (N - 1) * L records.
"""

import math
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Query
from pydantic import BaseModel

from second_brain.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination_params(
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[
        int, Query(ge=1, le=MAX_PAGE_SIZE, description="Items per page")
    ] = DEFAULT_PAGE_SIZE,
) -> PaginationParams:
    """Dependency: `pagination: PaginationParams = Depends(get_pagination_params)`."""
    return PaginationParams(page=page, limit=limit)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    request_id: str | None = None,
) -> dict[str, Any]:
    """
    Serialise one page into the list envelope.

    `items` may be ORM rows or dicts; each is validated through
    `item_schema`. has_more is true while records remain past this page.
    """
    seen = (page - 1) * limit + len(items)
    envelope = PaginatedResponse(
        data=[item_schema.model_validate(item).model_dump(mode="json") for item in items],
        pagination=PaginationInfo(
            total=total,
            limit=limit,
            page=page,
            total_pages=total_pages(total, limit),
            has_more=seen < total,
        ),
        metadata=ResponseMetadata(request_id=request_id) if request_id else ResponseMetadata(),
    )
    return envelope.model_dump(mode="json")
