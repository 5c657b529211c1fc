"""
Note Service.

Business logic layer for notes. Every operation is scoped to the
calling author; notes owned by anyone else behave as if absent.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.utils import utc_now
from second_brain.backend.models.note import Note
from second_brain.backend.repositories.note import NoteRepository
from second_brain.backend.schemas.note import NoteCreate, NoteSummary, NoteUpdate
from second_brain.backend.services.base import BaseService, to_buckets

TOP_TAGS_LIMIT = 10


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note listing, retrieval, mutation and per-user statistics.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def list_notes(
        self,
        author_id: str,
        search: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
        is_pinned: bool | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Note], int]:
        """
        List the author's notes with filters, ordering and pagination.

        Pinned notes come first unless sorting on is_pinned itself.

        Returns:
            Tuple of (notes on the requested page, total matching count)
        """
        criteria = self.repo.filter_criteria(
            search=search,
            category=category,
            tags=tags,
            is_pinned=is_pinned,
        )
        order_by = self.repo.ordering(sort_by, descending=sort_order == "desc")

        self._log_debug("Listing notes", author_id=author_id, page=page, limit=limit)
        notes = await self.repo.list_owned(
            author_id,
            *criteria,
            order_by=order_by,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await self.repo.count_owned(author_id, *criteria)
        return notes, total

    async def get_note(self, author_id: str, note_id: str) -> Note:
        """
        Get a note and record the read.

        Raises:
            NotFoundError: If the note is missing or not the author's
        """
        note = await self.repo.get_owned(note_id, author_id)
        note.read_count += 1
        note.last_read = utc_now()
        return await self._execute_db_operation("read_note", self.repo.save(note))

    async def create_note(self, author_id: str, data: NoteCreate) -> Note:
        """Create a note owned by the caller."""
        self._log_operation("Creating note", author_id=author_id, title=data.title)

        fields = data.model_dump(mode="json")
        fields["author_id"] = author_id
        note = await self._execute_db_operation("create_note", self.repo.create(**fields))

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(self, author_id: str, note_id: str, data: NoteUpdate) -> Note:
        """
        Update the supplied fields of a note.

        Raises:
            NotFoundError: If the note is missing or not the author's
        """
        note = await self.repo.get_owned(note_id, author_id)
        changes = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if not changes:
            return note

        self._log_operation("Updating note", note_id=note_id, fields=list(changes))
        return await self._execute_db_operation(
            "update_note",
            self.repo.update(note, **changes),
        )

    async def delete_note(self, author_id: str, note_id: str) -> None:
        """
        Permanently delete a note.

        Raises:
            NotFoundError: If the note is missing or not the author's
        """
        note = await self.repo.get_owned(note_id, author_id)
        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation("delete_note", self.repo.delete(note))

    async def toggle_pin(self, author_id: str, note_id: str) -> Note:
        """Flip the pinned flag of a note."""
        note = await self.repo.get_owned(note_id, author_id)
        self._log_operation("Toggling note pin", note_id=note_id, pinned=not note.is_pinned)
        return await self._execute_db_operation(
            "toggle_pin",
            self.repo.update(note, is_pinned=not note.is_pinned),
        )

    async def summary(self, author_id: str) -> NoteSummary:
        """Counts, category breakdown and most used tags for the author."""
        return NoteSummary(
            total_notes=await self.repo.count_owned(author_id),
            pinned_notes=await self.repo.count_pinned(author_id),
            public_notes=await self.repo.count_public(author_id),
            category_stats=to_buckets(await self.repo.count_by(author_id, "category")),
            tag_stats=to_buckets(await self.repo.tag_counts(author_id, TOP_TAGS_LIMIT)),
        )
