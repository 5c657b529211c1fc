"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from second_brain.backend.schemas.base import CountBucket

NoteCategory = Literal["personal", "work", "study", "ideas", "journal", "other"]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]
HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]


class Attachment(BaseModel):
    """File attached to a note or task."""

    filename: str | None = None
    url: str | None = None
    type: str | None = None
    size: int | None = Field(default=None, ge=0)


class NoteCreate(BaseModel):
    """Schema for creating a new note."""

    title: Title = Field(..., description="Note title", examples=["Reading list"])
    content: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Note content",
        examples=["Books to read this year."],
    )
    tags: list[Tag] = Field(default_factory=list)
    category: NoteCategory = "personal"
    is_public: bool = False
    is_pinned: bool = False
    color: HexColor = "#ffffff"
    attachments: list[Attachment] = Field(default_factory=list)


class NoteUpdate(BaseModel):
    """Schema for updating an existing note. Omitted fields are left unchanged."""

    title: Title | None = None
    content: str | None = Field(default=None, min_length=1, max_length=10000)
    tags: list[Tag] | None = None
    category: NoteCategory | None = None
    is_public: bool | None = None
    is_pinned: bool | None = None
    color: HexColor | None = None
    attachments: list[Attachment] | None = None


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    author_id: str
    title: str
    content: str
    excerpt: str = Field(description="First 150 characters of the content")
    tags: list[str]
    category: str
    is_public: bool
    is_pinned: bool
    color: str
    attachments: list[Attachment]
    read_count: int
    last_read: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteSummary(BaseModel):
    """Per-user note counts and breakdowns."""

    total_notes: int
    pinned_notes: int
    public_notes: int
    category_stats: list[CountBucket]
    tag_stats: list[CountBucket]
