"""
Note Model.

Freeform notes owned by a single author.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from second_brain.backend.core.utils import utc_now
from second_brain.backend.models.base import (
    Base,
    OwnedMixin,
    TaggedMixin,
    TimestampMixin,
    UUIDMixin,
)

EXCERPT_LENGTH = 150


class Note(UUIDMixin, TimestampMixin, OwnedMixin, TaggedMixin, Base):
    """
    Note database model.

    Tags and attachments are stored as JSON arrays. The excerpt is
    derived from the content and never stored.
    """

    __tablename__ = "notes"

    # Columns searched by free-text queries
    search_fields = ("title", "content")

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(
        String(20),
        default="personal",
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_pinned: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)
    color: Mapped[str] = mapped_column(String(7), default="#ffffff", nullable=False)
    attachments: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    read_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_read: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    @property
    def excerpt(self) -> str:
        if len(self.content) > EXCERPT_LENGTH:
            return self.content[:EXCERPT_LENGTH] + "..."
        return self.content

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
