"""
Aggregation Service.

Group-and-count and group-and-average summaries over one author's notes
and tasks.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.utils import start_of_year, utc_now
from second_brain.backend.repositories.note import NoteRepository
from second_brain.backend.repositories.task import TaskRepository
from second_brain.backend.schemas.dashboard import MonthlyActivity, MonthlyCount
from second_brain.backend.services.base import BaseService


class AggregationService(BaseService):
    """Numeric summaries scoped to one author."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.notes = NoteRepository(session)
        self.tasks = TaskRepository(session)

    async def monthly_activity(
        self,
        author_id: str,
        now: datetime | None = None,
    ) -> MonthlyActivity:
        """
        Notes and tasks created per month of the current calendar year.

        Months without activity are left out rather than reported as zero.
        """
        since = start_of_year(now or utc_now())
        note_months = await self.notes.monthly_created_counts(author_id, since)
        task_months = await self.tasks.monthly_created_counts(author_id, since)
        return MonthlyActivity(
            year=since.year,
            notes=[MonthlyCount(month=m, count=c) for m, c in note_months],
            tasks=[MonthlyCount(month=m, count=c) for m, c in task_months],
        )

    async def note_averages(self, author_id: str) -> dict[str, float]:
        return {"avg_read_count": await self.notes.average(author_id, "read_count")}

    async def task_averages(self, author_id: str) -> dict[str, float]:
        return {
            "avg_estimated_time": await self.tasks.average(author_id, "estimated_time"),
            "avg_actual_time": await self.tasks.average(author_id, "actual_time"),
        }
