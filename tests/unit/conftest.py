"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from second_brain.backend.models.note import Note
from second_brain.backend.models.task import Task
from second_brain.backend.core.utils import utc_now

AUTHOR_ID = "user-alice"


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Provides a fully mocked AsyncSession with common methods.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = note
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    return result


# =============================================================================
# Model Factories
# =============================================================================


def make_note(**overrides) -> Note:
    """Build a fully populated, unsaved Note."""
    now = utc_now()
    fields = {
        "id": "note-1",
        "author_id": AUTHOR_ID,
        "title": "Reading list",
        "content": "Books to read this year.",
        "tags": ["books"],
        "category": "personal",
        "is_public": False,
        "is_pinned": False,
        "color": "#ffffff",
        "attachments": [],
        "read_count": 0,
        "last_read": now,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return Note(**fields)


def make_task(**overrides) -> Task:
    """Build a fully populated, unsaved Task."""
    now = utc_now()
    fields = {
        "id": "task-1",
        "author_id": AUTHOR_ID,
        "title": "File taxes",
        "description": None,
        "status": "todo",
        "priority": "medium",
        "category": "personal",
        "due_date": None,
        "completed_at": None,
        "estimated_time": None,
        "actual_time": None,
        "tags": [],
        "subtasks": [],
        "attachments": [],
        "notes": [],
        "is_recurring": False,
        "recurring_pattern": "daily",
        "parent_task_id": None,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return Task(**fields)


@pytest.fixture
def note_factory():
    """Factory fixture for unsaved Note instances."""
    return make_note


@pytest.fixture
def task_factory():
    """Factory fixture for unsaved Task instances."""
    return make_task
