"""
Task Model.

Structured tasks with subtasks, a free-form log and due-date tracking.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from second_brain.backend.core.utils import utc_now
from second_brain.backend.models.base import (
    Base,
    OwnedMixin,
    TaggedMixin,
    TimestampMixin,
    UUIDMixin,
)

STATUS_COMPLETED = "completed"


class Task(UUIDMixin, TimestampMixin, OwnedMixin, TaggedMixin, Base):
    """
    Task database model.

    Subtasks, attachments and log entries are embedded JSON arrays.
    `completion_percentage` and `is_overdue` are derived on read.
    `parent_task_id` is a plain grouping reference with no cascade.
    """

    __tablename__ = "tasks"

    search_fields = ("title", "description")

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="todo", nullable=False, index=True)
    priority: Mapped[str] = mapped_column(
        String(10),
        default="medium",
        nullable=False,
        index=True,
    )
    category: Mapped[str] = mapped_column(String(20), default="personal", nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    estimated_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    subtasks: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    attachments: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    is_recurring: Mapped[bool] = mapped_column(default=False, nullable=False)
    recurring_pattern: Mapped[str] = mapped_column(String(10), default="daily", nullable=False)
    parent_task_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    @property
    def completion_percentage(self) -> int:
        subtasks = self.subtasks or []
        if not subtasks:
            return 100 if self.status == STATUS_COMPLETED else 0
        done = sum(1 for subtask in subtasks if subtask.get("completed"))
        # round half up
        return int(done * 100 / len(subtasks) + 0.5)

    @property
    def is_overdue(self) -> bool:
        if self.due_date is None or self.status == STATUS_COMPLETED:
            return False
        return utc_now() > self.due_date

    def apply_status(self, status: str) -> None:
        """
        Set the status and keep completed_at in step with it.

        completed_at is stamped on the transition into completed and
        cleared whenever the task leaves that state.
        """
        if status == STATUS_COMPLETED:
            if self.status != STATUS_COMPLETED or self.completed_at is None:
                self.completed_at = utc_now()
        else:
            self.completed_at = None
        self.status = status

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title!r}, status={self.status!r})>"
