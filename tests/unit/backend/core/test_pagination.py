"""
Unit Tests for Pagination Utilities.

Tests the page-number pagination helpers.
"""

from datetime import datetime

import pytest
from pydantic import BaseModel

from second_brain.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    total_pages,
)


class _Item(BaseModel):
    id: int
    created_at: datetime


class TestPaginationParams:
    """Tests for PaginationParams."""

    @pytest.mark.parametrize(
        ("page", "limit", "offset"),
        [(1, 10, 0), (2, 10, 10), (3, 25, 50)],
    )
    def test_offset_is_pages_before_times_limit(self, page, limit, offset):
        assert PaginationParams(page=page, limit=limit).offset == offset


class TestTotalPages:
    """Tests for total_pages."""

    def test_exact_multiple(self):
        assert total_pages(20, 10) == 2

    def test_partial_last_page(self):
        assert total_pages(21, 10) == 3

    def test_no_items(self):
        assert total_pages(0, 10) == 0


class TestCreatePaginatedResponse:
    """Tests for create_paginated_response."""

    def test_builds_envelope_with_pagination(self):
        items = [_Item(id=i, created_at=datetime(2026, 1, 1)) for i in range(10)]

        response = create_paginated_response(
            items=items,
            item_schema=_Item,
            total=25,
            page=1,
            limit=10,
            request_id="req-1",
        )

        assert response["success"] is True
        assert len(response["data"]) == 10
        assert response["data"][0]["created_at"] == "2026-01-01T00:00:00"
        assert response["metadata"]["request_id"] == "req-1"
        assert response["pagination"] == {
            "total": 25,
            "limit": 10,
            "page": 1,
            "total_pages": 3,
            "has_more": True,
        }

    def test_last_page_has_no_more(self):
        items = [_Item(id=i, created_at=datetime(2026, 1, 1)) for i in range(5)]

        response = create_paginated_response(
            items=items,
            item_schema=_Item,
            total=25,
            page=3,
            limit=10,
        )

        assert response["pagination"]["has_more"] is False
        assert response["pagination"]["page"] == 3
