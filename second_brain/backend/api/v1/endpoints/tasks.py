"""
Tasks API Endpoints.

REST API endpoints for task management, status transitions and the
per-task log.
"""

from datetime import date
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query

from second_brain.backend.core.dependencies import AuthUser, DbSession, RequestId
from second_brain.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from second_brain.backend.core.utils import split_csv
from second_brain.backend.schemas.base import ApiResponse, DeletedResponse
from second_brain.backend.schemas.task import (
    TaskCategory,
    TaskCreate,
    TaskNoteCreate,
    TaskPriority,
    TaskResponse,
    TaskStatus,
    TaskStatusUpdate,
    TaskSummary,
    TaskUpdate,
)
from second_brain.backend.services.task import TaskService

router = APIRouter()


@router.get(
    "",
    summary="List tasks (paginated)",
    description="Filter, search, sort and paginate the caller's tasks.",
)
async def list_tasks(
    user: AuthUser,
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    search: str | None = Query(default=None, max_length=200, description="Free-text query"),
    status: TaskStatus | None = Query(default=None),
    priority: TaskPriority | None = Query(default=None),
    category: TaskCategory | None = Query(default=None),
    tags: str | None = Query(default=None, description="Comma-separated tags, match any"),
    due_date: date | None = Query(default=None, description="Tasks due on this day (YYYY-MM-DD)"),
    sort_by: str = Query(default="created_at", description="Column to sort by"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
) -> dict[str, Any]:
    """List tasks with full pagination support."""
    service = TaskService(db)
    tasks, total = await service.list_tasks(
        user.id,
        search=search,
        status=status,
        priority=priority,
        category=category,
        tags=split_csv(tags),
        due_date=due_date,
        sort_by=sort_by,
        sort_order=sort_order,
        page=pagination.page,
        limit=pagination.limit,
    )

    return create_paginated_response(
        items=tasks,
        item_schema=TaskResponse,
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        request_id=request_id,
    )


@router.get(
    "/stats/summary",
    response_model=ApiResponse[TaskSummary],
    summary="Task statistics",
    description="Totals, completion rate and status/priority/category breakdowns.",
)
async def task_summary(user: AuthUser, db: DbSession) -> ApiResponse[TaskSummary]:
    service = TaskService(db)
    return ApiResponse(data=await service.summary(user.id))


@router.get(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Get a task",
)
async def get_task(
    task_id: str,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    """Get a task by ID."""
    service = TaskService(db)
    task = await service.get_task(user.id, task_id)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.post(
    "",
    response_model=ApiResponse[TaskResponse],
    status_code=201,
    summary="Create a task",
    description="Create a new task owned by the caller.",
)
async def create_task(
    data: TaskCreate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    """Create a new task."""
    service = TaskService(db)
    task = await service.create_task(user.id, data)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.put(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    summary="Update a task",
    description="Update an existing task. Only provided fields are updated.",
)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    """Update a task."""
    service = TaskService(db)
    task = await service.update_task(user.id, task_id, data)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.delete(
    "/{task_id}",
    response_model=ApiResponse[DeletedResponse],
    summary="Delete a task",
    description="Permanently delete a task. Child tasks are left in place.",
)
async def delete_task(
    task_id: str,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[DeletedResponse]:
    """Delete a task."""
    service = TaskService(db)
    await service.delete_task(user.id, task_id)
    return ApiResponse(data=DeletedResponse(id=task_id))


@router.patch(
    "/{task_id}/status",
    response_model=ApiResponse[TaskResponse],
    summary="Change task status",
    description="Move a task to a new status. Completing it records completed_at.",
)
async def update_status(
    task_id: str,
    data: TaskStatusUpdate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    service = TaskService(db)
    task = await service.update_status(user.id, task_id, data.status)
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.post(
    "/{task_id}/notes",
    response_model=ApiResponse[TaskResponse],
    summary="Add a task note",
    description="Append a timestamped entry to the task log.",
)
async def append_note(
    task_id: str,
    data: TaskNoteCreate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[TaskResponse]:
    service = TaskService(db)
    task = await service.append_note(user.id, task_id, data.content)
    return ApiResponse(data=TaskResponse.model_validate(task))
