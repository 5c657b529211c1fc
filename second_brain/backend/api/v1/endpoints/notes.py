"""
Notes API Endpoints.

REST API endpoints for note management. Every route acts on behalf of
the authenticated caller and only ever sees the caller's notes.
"""

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
from second_brain.backend.schemas.note import (
    NoteCategory,
    NoteCreate,
    NoteResponse,
    NoteSummary,
    NoteUpdate,
)
from second_brain.backend.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    summary="List notes (paginated)",
    description="Filter, search, sort and paginate the caller's notes. Pinned notes come first.",
)
async def list_notes(
    user: AuthUser,
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    search: str | None = Query(default=None, max_length=200, description="Free-text query"),
    category: NoteCategory | None = Query(default=None),
    tags: str | None = Query(default=None, description="Comma-separated tags, match any"),
    is_pinned: bool | None = Query(default=None),
    sort_by: str = Query(default="created_at", description="Column to sort by"),
    sort_order: Literal["asc", "desc"] = Query(default="desc"),
) -> dict[str, Any]:
    """List notes with full pagination support."""
    service = NoteService(db)
    notes, total = await service.list_notes(
        user.id,
        search=search,
        category=category,
        tags=split_csv(tags),
        is_pinned=is_pinned,
        sort_by=sort_by,
        sort_order=sort_order,
        page=pagination.page,
        limit=pagination.limit,
    )

    return create_paginated_response(
        items=notes,
        item_schema=NoteResponse,
        total=total,
        page=pagination.page,
        limit=pagination.limit,
        request_id=request_id,
    )


@router.get(
    "/stats/summary",
    response_model=ApiResponse[NoteSummary],
    summary="Note statistics",
    description="Totals, category breakdown and the ten most used tags.",
)
async def note_summary(user: AuthUser, db: DbSession) -> ApiResponse[NoteSummary]:
    service = NoteService(db)
    return ApiResponse(data=await service.summary(user.id))


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID. Each fetch counts as a read.",
)
async def get_note(
    note_id: str,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(user.id, note_id)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a new note owned by the caller.",
)
async def create_note(
    data: NoteCreate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    service = NoteService(db)
    note = await service.create_note(user.id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    """Update a note."""
    service = NoteService(db)
    note = await service.update_note(user.id, note_id, data)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[DeletedResponse],
    summary="Delete a note",
    description="Permanently delete a note.",
)
async def delete_note(
    note_id: str,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[DeletedResponse]:
    """Delete a note."""
    service = NoteService(db)
    await service.delete_note(user.id, note_id)
    return ApiResponse(data=DeletedResponse(id=note_id))


@router.patch(
    "/{note_id}/pin",
    response_model=ApiResponse[NoteResponse],
    summary="Toggle pin",
    description="Pin an unpinned note or unpin a pinned one.",
)
async def toggle_pin(
    note_id: str,
    user: AuthUser,
    db: DbSession,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db)
    note = await service.toggle_pin(user.id, note_id)
    return ApiResponse(data=NoteResponse.model_validate(note))
