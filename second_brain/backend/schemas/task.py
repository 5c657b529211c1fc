"""
Task Schemas.

Pydantic schemas for task API request/response validation.
"""

from datetime import date, datetime
from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from second_brain.backend.core.utils import to_naive_utc
from second_brain.backend.schemas.base import CountBucket
from second_brain.backend.schemas.note import Attachment, Tag, Title

TaskStatus = Literal["todo", "in-progress", "review", "completed", "archived"]
TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskCategory = Literal["personal", "work", "study", "health", "finance", "other"]
RecurringPattern = Literal["daily", "weekly", "monthly", "yearly"]

_datetime_adapter = TypeAdapter(datetime)
_date_adapter = TypeAdapter(date)


def parse_due_date(value: Any) -> datetime | None:
    """
    Leniently coerce a due date.

    Accepts datetimes, dates and ISO strings; anything unparseable
    becomes None rather than failing the request.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return to_naive_utc(_datetime_adapter.validate_python(value))
    except PydanticValidationError:
        pass
    try:
        day = _date_adapter.validate_python(value)
    except PydanticValidationError:
        return None
    return datetime(day.year, day.month, day.day)


DueDate = Annotated[datetime | None, BeforeValidator(parse_due_date)]
Minutes = Annotated[float, Field(ge=0)]


class Subtask(BaseModel):
    """Checklist item embedded in a task."""

    title: Title
    completed: bool = False
    completed_at: datetime | None = None


class TaskLogEntry(BaseModel):
    """Free-form log entry attached to a task."""

    content: str
    created_at: datetime


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    title: Title = Field(..., description="Task title", examples=["File taxes"])
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    category: TaskCategory = "personal"
    due_date: DueDate = None
    estimated_time: Minutes | None = None
    actual_time: Minutes | None = None
    tags: list[Tag] = Field(default_factory=list)
    subtasks: list[Subtask] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    is_recurring: bool = False
    recurring_pattern: RecurringPattern = "daily"
    parent_task_id: str | None = None


class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.

    Omitted fields are left unchanged. Explicit null clears the
    fields listed in NULLABLE_FIELDS and is ignored for the rest.
    """

    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"description", "due_date", "estimated_time", "actual_time", "parent_task_id"}
    )

    title: Title | None = None
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    due_date: DueDate = None
    estimated_time: Minutes | None = None
    actual_time: Minutes | None = None
    tags: list[Tag] | None = None
    subtasks: list[Subtask] | None = None
    attachments: list[Attachment] | None = None
    is_recurring: bool | None = None
    recurring_pattern: RecurringPattern | None = None
    parent_task_id: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields supplied by the client, in model form."""
        supplied = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in supplied.items()
            if value is not None or key in self.NULLABLE_FIELDS
        }


class TaskStatusUpdate(BaseModel):
    """Schema for a status transition."""

    status: TaskStatus


class TaskNoteCreate(BaseModel):
    """Schema for appending a log entry to a task."""

    content: str = Field(..., min_length=1)


class TaskResponse(BaseModel):
    """Schema for task in API responses."""

    id: str = Field(description="Task unique identifier")
    author_id: str
    title: str
    description: str | None
    status: str
    priority: str
    category: str
    due_date: datetime | None
    completed_at: datetime | None
    estimated_time: float | None
    actual_time: float | None
    tags: list[str]
    subtasks: list[Subtask]
    attachments: list[Attachment]
    notes: list[TaskLogEntry]
    is_recurring: bool
    recurring_pattern: str
    parent_task_id: str | None
    completion_percentage: int
    is_overdue: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskSummary(BaseModel):
    """Per-user task counts and breakdowns."""

    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    completion_rate: int
    status_stats: list[CountBucket]
    priority_stats: list[CountBucket]
    category_stats: list[CountBucket]
