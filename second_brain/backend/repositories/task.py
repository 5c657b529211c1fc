"""
Task Repository.

Data access layer for tasks. Handles all database operations
for the Task model.
"""

from datetime import datetime

from sqlalchemy import ColumnElement

from second_brain.backend.core.utils import day_bounds, utc_now
from second_brain.backend.models.task import STATUS_COMPLETED, Task
from second_brain.backend.repositories.base import BaseRepository
from second_brain.backend.repositories.text_search import (
    SearchQuery,
    match_clause,
    tags_match_any,
)


def overdue_criteria(now: datetime) -> list[ColumnElement[bool]]:
    """Due before `now` and not completed."""
    return [Task.due_date < now, Task.status != STATUS_COMPLETED]


class TaskRepository(BaseRepository[Task]):
    """
    Repository for Task model.

    Inherits owner-scoped CRUD from BaseRepository and adds
    task-specific filtering and due-date queries.
    """

    model = Task

    def filter_criteria(
        self,
        search: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
        due_on: datetime | None = None,
    ) -> list[ColumnElement[bool]]:
        """Translate list filters into WHERE criteria."""
        criteria: list[ColumnElement[bool]] = []
        if search:
            criteria.append(match_clause(Task, SearchQuery.parse(search)))
        if status:
            criteria.append(Task.status == status)
        if priority:
            criteria.append(Task.priority == priority)
        if category:
            criteria.append(Task.category == category)
        if tags:
            criteria.append(tags_match_any(Task, tags))
        if due_on is not None:
            start, end = day_bounds(due_on)
            criteria.extend([Task.due_date >= start, Task.due_date < end])
        return criteria

    async def count_completed(self, author_id: str) -> int:
        return await self.count_owned(author_id, Task.status == STATUS_COMPLETED)

    async def count_overdue(self, author_id: str, now: datetime | None = None) -> int:
        return await self.count_owned(author_id, *overdue_criteria(now or utc_now()))

    async def list_upcoming(self, author_id: str, limit: int) -> list[Task]:
        """Soonest-due open tasks whose due date has not passed."""
        return await self.list_owned(
            author_id,
            Task.due_date >= utc_now(),
            Task.status != STATUS_COMPLETED,
            order_by=(Task.due_date.asc(),),
            limit=limit,
        )
