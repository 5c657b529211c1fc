from second_brain.backend.models.base import Base
from second_brain.backend.models.note import Note
from second_brain.backend.models.task import Task

__all__ = ["Base", "Note", "Task"]
