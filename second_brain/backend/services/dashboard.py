"""
Dashboard Service.

Composes note, task and aggregation results into the dashboard views:
overview, activity feed, cross-kind search and full statistics.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import BadRequestError
from second_brain.backend.repositories.text_search import SearchQuery
from second_brain.backend.schemas.dashboard import (
    ActivityFeed,
    ActivityItem,
    DashboardOverview,
    DashboardStats,
    NoteStats,
    OverviewCounts,
    SearchResult,
    SearchResults,
    TaskStats,
)
from second_brain.backend.schemas.note import NoteResponse
from second_brain.backend.schemas.task import TaskResponse
from second_brain.backend.services.aggregation import AggregationService
from second_brain.backend.services.base import BaseService, completion_rate
from second_brain.backend.services.note import NoteService
from second_brain.backend.services.task import TaskService

RECENT_LIMIT = 5
UPCOMING_LIMIT = 5
PINNED_LIMIT = 3


class DashboardService(BaseService):
    """
    Read-only composition over the other services.

    Sub-queries run one after another without a shared snapshot, so
    counts in one payload may be slightly out of step under concurrent writes.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.note_service = NoteService(session)
        self.task_service = TaskService(session)
        self.aggregation = AggregationService(session)

    async def overview(self, author_id: str) -> DashboardOverview:
        notes = self.note_service.repo
        tasks = self.task_service.repo

        total_tasks = await tasks.count_owned(author_id)
        completed_tasks = await tasks.count_completed(author_id)
        counts = OverviewCounts(
            total_notes=await notes.count_owned(author_id),
            total_tasks=total_tasks,
            completed_tasks=completed_tasks,
            overdue_tasks=await tasks.count_overdue(author_id),
            completion_rate=completion_rate(completed_tasks, total_tasks),
        )

        recent_notes = await notes.list_owned(
            author_id, order_by=(notes.sort_by("created_at"),), limit=RECENT_LIMIT
        )
        recent_tasks = await tasks.list_owned(
            author_id, order_by=(tasks.sort_by("created_at"),), limit=RECENT_LIMIT
        )
        upcoming = await tasks.list_upcoming(author_id, UPCOMING_LIMIT)
        pinned = await notes.list_pinned(author_id, PINNED_LIMIT)

        return DashboardOverview(
            overview=counts,
            recent_notes=[NoteResponse.model_validate(n) for n in recent_notes],
            recent_tasks=[TaskResponse.model_validate(t) for t in recent_tasks],
            upcoming_tasks=[TaskResponse.model_validate(t) for t in upcoming],
            pinned_notes=[NoteResponse.model_validate(n) for n in pinned],
        )

    async def activity_feed(self, author_id: str, page: int = 1, limit: int = 20) -> ActivityFeed:
        """
        Notes and tasks interleaved by updated_at, newest first.

        Each kind contributes its own newest page * limit records, which
        always contains every record of the requested merged page.
        """
        notes = self.note_service.repo
        tasks = self.task_service.repo
        window = page * limit

        recent_notes = await notes.list_owned(
            author_id, order_by=(notes.sort_by("updated_at"),), limit=window
        )
        recent_tasks = await tasks.list_owned(
            author_id, order_by=(tasks.sort_by("updated_at"),), limit=window
        )

        merged = [("note", n) for n in recent_notes] + [("task", t) for t in recent_tasks]
        merged.sort(key=lambda pair: pair[1].updated_at, reverse=True)
        start = (page - 1) * limit

        items = [self._activity_item(kind, record) for kind, record in merged[start:start + limit]]
        total = await notes.count_owned(author_id) + await tasks.count_owned(author_id)
        return ActivityFeed(items=items, page=page, limit=limit, total=total)

    async def search(
        self,
        author_id: str,
        query: str | None,
        kind: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> SearchResults:
        """
        Search notes and/or tasks and merge the hits by relevance.

        Each kind contributes at most its best page * limit hits, which is
        enough to fill the requested page of the merged ranking. `total`
        counts every match.

        Args:
            kind: "notes", "tasks" or None for both

        Raises:
            BadRequestError: If the query is missing or blank
        """
        if not query or not query.strip():
            raise BadRequestError("Search query is required")

        parsed = SearchQuery.parse(query)
        self._log_debug("Dashboard search", author_id=author_id, kind=kind)

        window = page * limit
        results: list[SearchResult] = []
        total = 0
        if kind in (None, "notes"):
            total += await self.note_service.repo.count_matches(author_id, parsed)
            for note, score in await self.note_service.repo.search(author_id, parsed, window):
                results.append(
                    SearchResult(type="note", score=score, record=NoteResponse.model_validate(note))
                )
        if kind in (None, "tasks"):
            total += await self.task_service.repo.count_matches(author_id, parsed)
            for task, score in await self.task_service.repo.search(author_id, parsed, window):
                results.append(
                    SearchResult(type="task", score=score, record=TaskResponse.model_validate(task))
                )

        results.sort(key=lambda result: result.score, reverse=True)
        start = (page - 1) * limit
        return SearchResults(
            query=query,
            results=results[start:start + limit],
            total=total,
            page=page,
            limit=limit,
        )

    async def stats(self, author_id: str) -> DashboardStats:
        note_summary = await self.note_service.summary(author_id)
        task_summary = await self.task_service.summary(author_id)
        return DashboardStats(
            notes=NoteStats(
                **note_summary.model_dump(),
                **await self.aggregation.note_averages(author_id),
            ),
            tasks=TaskStats(
                **task_summary.model_dump(),
                **await self.aggregation.task_averages(author_id),
            ),
            monthly_activity=await self.aggregation.monthly_activity(author_id),
        )

    @staticmethod
    def _activity_item(kind: str, record) -> ActivityItem:
        if kind == "note":
            return ActivityItem(type="note", record=NoteResponse.model_validate(record))
        return ActivityItem(type="task", record=TaskResponse.model_validate(record))
