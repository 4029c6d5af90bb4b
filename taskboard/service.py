"""Task business rules: defaults, normalization, partial updates and filtering.

All persistence goes through :class:`~taskboard.store.TaskFileStore`.
"""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from taskboard.errors import TaskNotFoundError
from taskboard.models import (
    Cleared,
    SetDueDate,
    Task,
    TaskCreate,
    TaskFilter,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from taskboard.store import TaskFileStore

logger = logging.getLogger(__name__)


def _normalize_description(description: str | None) -> str | None:
    """Trim ``description``; blank text becomes None."""
    if description is None:
        return None
    return description.strip() or None


def _matches(task: Task, filters: TaskFilter) -> bool:
    if filters.status and task.status != filters.status:
        return False
    if filters.priority and task.priority != filters.priority:
        return False
    if filters.search:
        haystack = f"{task.title} {task.description or ''}".lower()
        if filters.search.lower() not in haystack:
            return False
    return True


class TaskService:
    """Validated task operations on top of a store."""

    def __init__(self, store: TaskFileStore) -> None:
        self._store = store

    def list_tasks(self, filters: TaskFilter | None = None) -> list[Task]:
        """Return tasks matching every given criterion, in storage order."""
        tasks = self._store.read_all()
        if filters is None:
            return tasks
        return [t for t in tasks if _matches(t, filters)]

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by its ID, or None if not found."""
        return self._store.find_by_id(task_id)

    def create_task(self, data: TaskCreate) -> Task:
        """Create a new task with defaults applied and return it."""
        now = datetime.now(UTC)
        task = Task(
            id=str(uuid4()),
            title=data.title,
            description=_normalize_description(data.description),
            status=data.status or TaskStatus.TODO,
            priority=data.priority or TaskPriority.MEDIUM,
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        saved = self._store.save(task)
        logger.info("Created task %s", saved.id)
        return saved

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """Merge ``data`` into an existing task.

        Fields left out of ``data`` keep their current value. The due date
        can additionally be cleared with an explicit null.

        Raises:
            TaskNotFoundError: if no task has ``task_id``.
        """
        with self._store.locked():
            existing = self._store.find_by_id(task_id)
            if existing is None:
                raise TaskNotFoundError(task_id)

            fields_set = data.model_fields_set
            changes: dict = {"updated_at": max(datetime.now(UTC), existing.created_at)}
            if data.title is not None:
                changes["title"] = data.title
            if "description" in fields_set:
                changes["description"] = _normalize_description(data.description)
            if data.status is not None:
                changes["status"] = data.status
            if data.priority is not None:
                changes["priority"] = data.priority

            due = data.due_date_change
            if isinstance(due, Cleared):
                changes["due_date"] = None
            elif isinstance(due, SetDueDate):
                changes["due_date"] = due.value

            updated = self._store.update(existing.model_copy(update=changes))
        logger.info("Updated task %s fields=%s", task_id, sorted(fields_set))
        return updated

    def delete_task(self, task_id: str) -> None:
        """Delete a task.

        Raises:
            TaskNotFoundError: if no task has ``task_id``.
        """
        with self._store.locked():
            if self._store.find_by_id(task_id) is None:
                raise TaskNotFoundError(task_id)
            self._store.delete_by_id(task_id)
        logger.info("Deleted task %s", task_id)
