"""
Dashboard Schemas.

Response shapes for the composed dashboard views.
"""

from typing import Literal

from pydantic import BaseModel

from second_brain.backend.schemas.note import NoteResponse, NoteSummary
from second_brain.backend.schemas.task import TaskResponse, TaskSummary

RecordKind = Literal["note", "task"]


class OverviewCounts(BaseModel):
    total_notes: int
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    completion_rate: int


class DashboardOverview(BaseModel):
    """Counts plus the short lists shown on the dashboard home."""

    overview: OverviewCounts
    recent_notes: list[NoteResponse]
    recent_tasks: list[TaskResponse]
    upcoming_tasks: list[TaskResponse]
    pinned_notes: list[NoteResponse]


class ActivityItem(BaseModel):
    type: RecordKind
    record: NoteResponse | TaskResponse


class ActivityFeed(BaseModel):
    """Notes and tasks interleaved by last update, newest first."""

    items: list[ActivityItem]
    page: int
    limit: int
    total: int


class SearchResult(BaseModel):
    type: RecordKind
    score: float
    record: NoteResponse | TaskResponse


class SearchResults(BaseModel):
    query: str
    results: list[SearchResult]
    total: int
    page: int
    limit: int


class MonthlyCount(BaseModel):
    month: int
    count: int


class MonthlyActivity(BaseModel):
    """Records created per month of the current year. Months with none are omitted."""

    year: int
    notes: list[MonthlyCount]
    tasks: list[MonthlyCount]


class NoteStats(NoteSummary):
    avg_read_count: float


class TaskStats(TaskSummary):
    avg_estimated_time: float
    avg_actual_time: float


class DashboardStats(BaseModel):
    notes: NoteStats
    tasks: TaskStats
    monthly_activity: MonthlyActivity
