"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from second_brain.backend.api.v1.endpoints import dashboard, notes, tasks

router = APIRouter()

router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
