"""
Base Repository.

Base class for all repositories. Every query is scoped to one author:
a record owned by someone else is indistinguishable from a missing one.
"""

from collections import Counter
from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, UnaryExpression, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import BadRequestError, NotFoundError
from second_brain.backend.core.logging import get_logger
from second_brain.backend.models.base import Base
from second_brain.backend.repositories.text_search import (
    SearchQuery,
    match_clause,
    relevance_score,
)

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with owner-scoped CRUD and aggregation queries.

    Subclasses should set the model class:

        class NoteRepository(BaseRepository[Note]):
            model = Note
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _owned(self, author_id: str, *criteria: ColumnElement[bool]):
        return select(self.model).where(self.model.author_id == author_id, *criteria)

    async def find_owned(self, id: str, author_id: str) -> ModelType | None:
        """Get a record by ID if it exists and belongs to the author."""
        result = await self.session.execute(
            self._owned(author_id, self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def get_owned(self, id: str, author_id: str) -> ModelType:
        """
        Get a record by ID owned by the author.

        Raises:
            NotFoundError: If the record is missing or owned by someone else
        """
        instance = await self.find_owned(id, author_id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def list_owned(
        self,
        author_id: str,
        *criteria: ColumnElement[bool],
        order_by: tuple[Any, ...] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> list[ModelType]:
        """List the author's records matching the criteria."""
        stmt = self._owned(author_id, *criteria).order_by(*order_by, self.model.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_owned(self, author_id: str, *criteria: ColumnElement[bool]) -> int:
        """Count the author's records matching the criteria."""
        result = await self.session.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.author_id == author_id, *criteria)
        )
        return result.scalar_one()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        return await self.add(instance)

    async def add(self, instance: ModelType) -> ModelType:
        """Persist an already-built instance."""
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Apply field changes to a loaded record and flush them."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        return await self.save(instance)

    async def save(self, instance: ModelType) -> ModelType:
        """Flush pending changes on a loaded record."""
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Permanently delete a loaded record."""
        await self.session.delete(instance)
        await self.session.flush()

    def sort_by(self, field: str, descending: bool = True) -> UnaryExpression:
        """
        Ordering for a column of this model.

        Raises:
            BadRequestError: If the field is not a column of the model
        """
        if field not in self.model.__table__.columns:
            raise BadRequestError(f"Cannot sort by '{field}'")
        column = getattr(self.model, field)
        return column.desc() if descending else column.asc()

    # -------------------------------------------------------------------------
    # Aggregations
    # -------------------------------------------------------------------------

    async def count_by(self, author_id: str, field: str) -> list[tuple[Any, int]]:
        """Group the author's records by a column and count each group."""
        column = getattr(self.model, field)
        result = await self.session.execute(
            select(column, func.count())
            .where(self.model.author_id == author_id)
            .group_by(column)
            .order_by(func.count().desc(), column)
        )
        return [(key, count) for key, count in result.all()]

    async def average(self, author_id: str, field: str) -> float:
        """Average of a numeric column over the author's records; 0 when none."""
        column = getattr(self.model, field)
        result = await self.session.execute(
            select(func.avg(column)).where(self.model.author_id == author_id)
        )
        value = result.scalar_one_or_none()
        return float(value) if value is not None else 0.0

    async def tag_counts(self, author_id: str, limit: int) -> list[tuple[str, int]]:
        """Most frequent tags across the author's records."""
        result = await self.session.execute(
            select(self.model.tags).where(self.model.author_id == author_id)
        )
        counter: Counter[str] = Counter()
        for tags in result.scalars():
            counter.update(tags or [])
        return counter.most_common(limit)

    async def monthly_created_counts(
        self,
        author_id: str,
        since: datetime,
    ) -> list[tuple[int, int]]:
        """Records created per calendar month since the given instant, month ascending."""
        month = extract("month", self.model.created_at)
        result = await self.session.execute(
            select(month, func.count())
            .where(
                self.model.author_id == author_id,
                self.model.created_at >= since,
            )
            .group_by(month)
            .order_by(month)
        )
        return [(int(m), count) for m, count in result.all()]

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(
        self,
        author_id: str,
        query: SearchQuery,
        limit: int | None = None,
    ) -> list[tuple[ModelType, float]]:
        """
        Records matching a free-text query with their relevance, best match
        first (ties newest first), at most `limit` of them.
        """
        score = relevance_score(self.model, query).label("score")
        stmt = (
            select(self.model, score)
            .where(self.model.author_id == author_id, match_clause(self.model, query))
            .order_by(score.desc(), self.model.updated_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [(instance, float(value or 0)) for instance, value in result.all()]

    async def count_matches(self, author_id: str, query: SearchQuery) -> int:
        return await self.count_owned(author_id, match_clause(self.model, query))
