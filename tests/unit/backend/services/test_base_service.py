"""
Unit Tests for Base Service.

Tests the BaseService error wrapping and the shared statistics helpers.
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from second_brain.backend.core.exceptions import ConflictError, DatabaseError
from second_brain.backend.services.base import BaseService, completion_rate, to_buckets


class TestBaseServiceInit:
    def test_init_stores_session(self):
        mock_session = AsyncMock()

        service = BaseService(mock_session)

        assert service.session is mock_session
        assert service._logger is not None


class TestExecuteDbOperation:
    """Tests for _execute_db_operation."""

    @pytest.fixture
    def service(self):
        return BaseService(AsyncMock())

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self, service):
        async def successful_operation():
            return {"id": "123"}

        result = await service._execute_db_operation("op", successful_operation())

        assert result == {"id": "123"}

    @pytest.mark.asyncio
    async def test_raises_conflict_on_unique_violation(self, service):
        async def failing_operation():
            raise IntegrityError("statement", {}, Exception("UNIQUE constraint failed"))

        with pytest.raises(ConflictError, match="already exists"):
            await service._execute_db_operation("create_note", failing_operation())

    @pytest.mark.asyncio
    async def test_raises_database_error_on_other_integrity_error(self, service):
        async def failing_operation():
            raise IntegrityError("statement", {}, Exception("NOT NULL constraint failed"))

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("update_task", failing_operation())

        assert "constraint violation" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_raises_database_error_on_sqlalchemy_error(self, service):
        async def failing_operation():
            raise SQLAlchemyError("Connection lost")

        with pytest.raises(DatabaseError) as exc_info:
            await service._execute_db_operation("read_note", failing_operation())

        assert "operation failed" in exc_info.value.message


class TestCompletionRate:
    """Tests for completion_rate."""

    def test_zero_total_is_zero(self):
        assert completion_rate(0, 0) == 0

    def test_rounds_to_nearest(self):
        assert completion_rate(1, 3) == 33
        assert completion_rate(2, 3) == 67

    def test_half_rounds_up(self):
        assert completion_rate(1, 8) == 13

    def test_all_done(self):
        assert completion_rate(4, 4) == 100


class TestToBuckets:
    def test_wraps_pairs(self):
        buckets = to_buckets([("work", 3), (None, 1)])
        assert [(b.key, b.count) for b in buckets] == [("work", 3), (None, 1)]
