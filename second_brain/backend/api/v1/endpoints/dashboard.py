"""
Dashboard API Endpoints.

Composed read-only views across the caller's notes and tasks.
"""

from typing import Literal

from fastapi import APIRouter, Query

from second_brain.backend.core.dependencies import AuthUser, DbSession, RequestId
from second_brain.backend.schemas.base import ApiResponse, ResponseMetadata
from second_brain.backend.schemas.dashboard import (
    ActivityFeed,
    DashboardOverview,
    DashboardStats,
    SearchResults,
)
from second_brain.backend.services.dashboard import DashboardService

router = APIRouter()


@router.get(
    "/overview",
    response_model=ApiResponse[DashboardOverview],
    summary="Dashboard overview",
    description="Headline counts with recent, upcoming and pinned items.",
)
async def overview(user: AuthUser, db: DbSession) -> ApiResponse[DashboardOverview]:
    service = DashboardService(db)
    return ApiResponse(data=await service.overview(user.id))


@router.get(
    "/activity",
    response_model=ApiResponse[ActivityFeed],
    summary="Recent activity",
    description="Notes and tasks interleaved by last update, newest first.",
)
async def activity(
    user: AuthUser,
    db: DbSession,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> ApiResponse[ActivityFeed]:
    service = DashboardService(db)
    return ApiResponse(data=await service.activity_feed(user.id, page=page, limit=limit))


@router.get(
    "/search",
    response_model=ApiResponse[SearchResults],
    summary="Search everything",
    description="Free-text search over notes and tasks, best match first.",
)
async def search(
    user: AuthUser,
    db: DbSession,
    request_id: RequestId,
    q: str | None = Query(default=None, max_length=200, description="Search query"),
    kind: Literal["notes", "tasks"] | None = Query(
        default=None,
        alias="type",
        description="Restrict to notes or tasks",
    ),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> ApiResponse[SearchResults]:
    service = DashboardService(db)
    results = await service.search(user.id, q, kind=kind, page=page, limit=limit)
    return ApiResponse(data=results, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/stats",
    response_model=ApiResponse[DashboardStats],
    summary="Full statistics",
    description="Note and task statistics with monthly activity for the current year.",
)
async def stats(user: AuthUser, db: DbSession) -> ApiResponse[DashboardStats]:
    service = DashboardService(db)
    return ApiResponse(data=await service.stats(user.id))
