"""
Task Service.

Business logic layer for tasks: owner-scoped CRUD, status transitions,
subtask bookkeeping and the embedded task log.
"""

from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import ValidationError
from second_brain.backend.core.utils import utc_now
from second_brain.backend.models.task import Task
from second_brain.backend.repositories.task import TaskRepository
from second_brain.backend.schemas.task import Subtask, TaskCreate, TaskSummary, TaskUpdate
from second_brain.backend.services.base import BaseService, completion_rate, to_buckets


def stamp_subtasks(subtasks: list[Subtask]) -> list[dict]:
    """
    Serialize subtasks for storage.

    A completed subtask without a timestamp is stamped now; an open
    subtask never keeps one.
    """
    now = utc_now()
    stored = []
    for subtask in subtasks:
        if subtask.completed:
            completed_at = subtask.completed_at or now
        else:
            completed_at = None
        stored.append(
            Subtask(
                title=subtask.title,
                completed=subtask.completed,
                completed_at=completed_at,
            ).model_dump(mode="json")
        )
    return stored


class TaskService(BaseService):
    """
    Service for task business logic.

    completed_at always follows status: it is set on entering
    "completed" and cleared on leaving it.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TaskRepository(session)

    async def list_tasks(
        self,
        author_id: str,
        search: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
        due_date: date | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Task], int]:
        """
        List the author's tasks with filters, ordering and pagination.

        A due_date filter matches tasks due at any time on that calendar day.

        Returns:
            Tuple of (tasks on the requested page, total matching count)
        """
        due_on = datetime(due_date.year, due_date.month, due_date.day) if due_date else None
        criteria = self.repo.filter_criteria(
            search=search,
            status=status,
            priority=priority,
            category=category,
            tags=tags,
            due_on=due_on,
        )
        order_by = (self.repo.sort_by(sort_by, descending=sort_order == "desc"),)

        self._log_debug("Listing tasks", author_id=author_id, page=page, limit=limit)
        tasks = await self.repo.list_owned(
            author_id,
            *criteria,
            order_by=order_by,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await self.repo.count_owned(author_id, *criteria)
        return tasks, total

    async def get_task(self, author_id: str, task_id: str) -> Task:
        """
        Get a task by ID.

        Raises:
            NotFoundError: If the task is missing or not the author's
        """
        return await self.repo.get_owned(task_id, author_id)

    async def create_task(self, author_id: str, data: TaskCreate) -> Task:
        """Create a task owned by the caller."""
        await self._check_parent(author_id, data.parent_task_id)
        self._log_operation("Creating task", author_id=author_id, title=data.title)

        task = Task(
            author_id=author_id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            category=data.category,
            due_date=data.due_date,
            estimated_time=data.estimated_time,
            actual_time=data.actual_time,
            tags=list(data.tags),
            subtasks=stamp_subtasks(data.subtasks),
            attachments=[a.model_dump(mode="json") for a in data.attachments],
            notes=[],
            is_recurring=data.is_recurring,
            recurring_pattern=data.recurring_pattern,
            parent_task_id=data.parent_task_id,
        )
        task.apply_status(data.status)

        task = await self._execute_db_operation("create_task", self.repo.add(task))
        self._log_debug("Task created", task_id=task.id)
        return task

    async def update_task(self, author_id: str, task_id: str, data: TaskUpdate) -> Task:
        """
        Update the supplied fields of a task.

        Raises:
            NotFoundError: If the task is missing or not the author's
            ValidationError: If parent_task_id does not name another of the author's tasks
        """
        task = await self.repo.get_owned(task_id, author_id)
        changes = data.changes()
        if not changes:
            return task

        self._log_operation("Updating task", task_id=task_id, fields=sorted(changes))
        if changes.get("parent_task_id"):
            await self._check_parent(author_id, changes["parent_task_id"], task_id=task.id)
        if "subtasks" in changes:
            changes["subtasks"] = stamp_subtasks(data.subtasks)
        if "attachments" in changes:
            changes["attachments"] = [a.model_dump(mode="json") for a in data.attachments]
        if "status" in changes:
            task.apply_status(changes.pop("status"))

        return await self._execute_db_operation(
            "update_task",
            self.repo.update(task, **changes),
        )

    async def delete_task(self, author_id: str, task_id: str) -> None:
        """
        Permanently delete a task. Child tasks keep their parent reference.

        Raises:
            NotFoundError: If the task is missing or not the author's
        """
        task = await self.repo.get_owned(task_id, author_id)
        self._log_operation("Deleting task", task_id=task_id)
        await self._execute_db_operation("delete_task", self.repo.delete(task))

    async def update_status(self, author_id: str, task_id: str, status: str) -> Task:
        """Move a task to a new status."""
        task = await self.repo.get_owned(task_id, author_id)
        self._log_operation("Updating task status", task_id=task_id, status=status)
        task.apply_status(status)
        return await self._execute_db_operation("update_status", self.repo.save(task))

    async def append_note(self, author_id: str, task_id: str, content: str) -> Task:
        """Append a timestamped entry to the task log."""
        task = await self.repo.get_owned(task_id, author_id)
        entry = {"content": content, "created_at": utc_now().isoformat()}
        self._log_operation("Appending task note", task_id=task_id)
        return await self._execute_db_operation(
            "append_note",
            self.repo.update(task, notes=[*(task.notes or []), entry]),
        )

    async def summary(self, author_id: str) -> TaskSummary:
        """Counts, completion rate and breakdowns for the author's tasks."""
        total = await self.repo.count_owned(author_id)
        completed = await self.repo.count_completed(author_id)
        return TaskSummary(
            total_tasks=total,
            completed_tasks=completed,
            overdue_tasks=await self.repo.count_overdue(author_id),
            completion_rate=completion_rate(completed, total),
            status_stats=to_buckets(await self.repo.count_by(author_id, "status")),
            priority_stats=to_buckets(await self.repo.count_by(author_id, "priority")),
            category_stats=to_buckets(await self.repo.count_by(author_id, "category")),
        )

    async def _check_parent(
        self,
        author_id: str,
        parent_task_id: str | None,
        task_id: str | None = None,
    ) -> None:
        if not parent_task_id:
            return
        if parent_task_id == task_id:
            raise ValidationError(
                "A task cannot be its own parent",
                details={"parent_task_id": "self reference"},
            )
        if await self.repo.find_owned(parent_task_id, author_id) is None:
            raise ValidationError(
                "Parent task not found",
                details={"parent_task_id": "not found"},
            )
