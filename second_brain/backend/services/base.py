"""
Base Service.

Services hold the business rules and sit between the API layer and the
repositories. Every public method takes the caller's author_id first;
ownership is enforced by the owner-scoped repository queries.

Usage:
    class NoteService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = NoteRepository(session)
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import ConflictError, DatabaseError
from second_brain.backend.core.logging import get_logger
from second_brain.backend.schemas.base import CountBucket

T = TypeVar("T")


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed items, rounded half up; 0 when there are none."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


def to_buckets(pairs: list[tuple[Any, int]]) -> list[CountBucket]:
    """Wrap (key, count) rows from a group-and-count query."""
    return [
        CountBucket(key=None if key is None else str(key), count=count)
        for key, count in pairs
    ]


class BaseService:
    """Session holder with database error translation and service-tagged logging."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(type(self).__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, awaitable: Awaitable[T]) -> T:
        """
        Await a repository write, translating driver errors.

        Raises:
            ConflictError: On a unique constraint violation
            DatabaseError: On any other SQLAlchemy failure
        """
        try:
            return await awaitable
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            reason = str(e.orig).lower()
            if "unique" in reason or "duplicate" in reason:
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error("Database error", extra={"operation": operation, "error": str(e)})
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, message: str, **context: Any) -> None:
        """INFO-level record of a state-changing operation."""
        self._logger.info(message, extra={"service": type(self).__name__, **context})

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, extra={"service": type(self).__name__, **context})
