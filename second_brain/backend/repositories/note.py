"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import ColumnElement

from second_brain.backend.models.note import Note
from second_brain.backend.repositories.base import BaseRepository
from second_brain.backend.repositories.text_search import (
    SearchQuery,
    match_clause,
    tags_match_any,
)


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits owner-scoped CRUD from BaseRepository and adds
    note-specific filtering and ordering.
    """

    model = Note

    def filter_criteria(
        self,
        search: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
        is_pinned: bool | None = None,
    ) -> list[ColumnElement[bool]]:
        """Translate list filters into WHERE criteria."""
        criteria: list[ColumnElement[bool]] = []
        if search:
            criteria.append(match_clause(Note, SearchQuery.parse(search)))
        if category:
            criteria.append(Note.category == category)
        if tags:
            criteria.append(tags_match_any(Note, tags))
        if is_pinned is not None:
            criteria.append(Note.is_pinned == is_pinned)
        return criteria

    def ordering(self, sort_by: str, descending: bool) -> tuple:
        """
        Order by the requested column with pinned notes always first.

        Sorting explicitly on is_pinned replaces the pinned-first rule.
        """
        primary = self.sort_by(sort_by, descending)
        if sort_by == "is_pinned":
            return (primary,)
        return (Note.is_pinned.desc(), primary)

    async def list_pinned(self, author_id: str, limit: int) -> list[Note]:
        """Most recently updated pinned notes."""
        return await self.list_owned(
            author_id,
            Note.is_pinned.is_(True),
            order_by=(Note.updated_at.desc(),),
            limit=limit,
        )

    async def count_pinned(self, author_id: str) -> int:
        return await self.count_owned(author_id, Note.is_pinned.is_(True))

    async def count_public(self, author_id: str) -> int:
        return await self.count_owned(author_id, Note.is_public.is_(True))
