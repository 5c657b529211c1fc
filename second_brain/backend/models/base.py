"""
SQLAlchemy Base Model.

Base class for all database models with common fields and utilities.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from second_brain.backend.core.utils import utc_now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        index=True,
    )


class UUIDMixin:
    """Mixin that adds a UUID primary key."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )


class OwnedMixin:
    """Mixin for records owned by exactly one user."""

    author_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        index=True,
    )


TAG_SEPARATOR = "\n"


class TaggedMixin:
    """
    Mixin for records carrying a JSON list of tags.

    `tags_text` is a lower-cased copy of the tags, one per line, kept in
    step with every assignment to `tags`. Free-text search reads it so
    that queries match tag values rather than the serialised array.
    """

    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    tags_text: Mapped[str] = mapped_column(Text, default="", nullable=False)

    @validates("tags")
    def _sync_tags_text(self, key: str, tags: list[str] | None) -> list[str]:
        tags = list(tags or [])
        self.tags_text = TAG_SEPARATOR.join(tag.lower() for tag in tags)
        return tags
