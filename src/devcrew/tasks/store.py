"""In-memory task store: the only place task state lives."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from devcrew.errors.exceptions import InvalidTransitionError
from devcrew.tasks.models import (
    ALLOWED_TRANSITIONS,
    Task,
    TaskPriority,
    TaskStatus,
    _generate_id,
)

logger = logging.getLogger("devcrew.tasks.store")


class TaskStore:
    """Keeps tasks in insertion order.

    Ids are never reused: every id the store has ever held is remembered,
    including ids of removed tasks.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._issued_ids: set[str] = set()

    # -- CRUD ------------------------------------------------------------------

    def create(
        self,
        title: str,
        description: str,
        assigned_to: str,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        dependencies: Iterable[str] | None = None,
    ) -> Task:
        """Create a new pending task."""
        if not assigned_to or not assigned_to.strip():
            raise ValueError("assigned_to is required")

        task_id = _generate_id()
        while task_id in self._issued_ids:
            task_id = _generate_id()

        now = datetime.now(UTC)
        task = Task(
            id=task_id,
            title=title,
            description=description,
            assigned_to=assigned_to.strip(),
            priority=TaskPriority(priority),
            dependencies=list(dependencies or []),
            created_at=now,
            updated_at=now,
        )
        return self.add(task)

    def add(self, task: Task) -> Task:
        """Insert a pre-built task. Its id must never have been used before."""
        if not task.assigned_to or not task.assigned_to.strip():
            raise ValueError("assigned_to is required")
        if task.id in self._issued_ids:
            raise ValueError(f"Task id already used: {task.id}")
        self._issued_ids.add(task.id)
        self._tasks[task.id] = task
        logger.info(
            "Created task %s (%s) assigned to %s [%s]",
            task.id,
            task.title,
            task.assigned_to,
            task.priority.value,
        )
        return task

    def get(self, task_id: str) -> Task | None:
        """Retrieve a task by ID."""
        return self._tasks.get(task_id)

    def update_status(
        self,
        task_id: str,
        status: TaskStatus | str,
        *,
        result: str | None = None,
        error: str | None = None,
        attempts: int | None = None,
        force: bool = False,
    ) -> Task | None:
        """Apply a status transition and refresh ``updated_at``.

        Returns None if the task does not exist. Raises
        ``InvalidTransitionError`` for a move the state machine forbids,
        unless ``force`` is set.
        """
        task = self._tasks.get(task_id)
        if task is None:
            return None

        new_status = TaskStatus(status)
        if (
            not force
            and new_status != task.status
            and new_status not in ALLOWED_TRANSITIONS[task.status]
        ):
            raise InvalidTransitionError(task_id, task.status.value, new_status.value)

        task.status = new_status
        task.updated_at = datetime.now(UTC)
        if result is not None:
            task.result = result
        if error is not None:
            task.error = error
        if attempts is not None:
            task.attempts = attempts
        logger.debug("Task %s -> %s", task_id, new_status.value)
        return task

    def remove(self, task_id: str) -> bool:
        """Remove a task by ID. Returns True if it existed."""
        if task_id in self._tasks:
            del self._tasks[task_id]
            logger.info("Removed task %s", task_id)
            return True
        return False

    def all(self) -> list[Task]:
        """Return all tasks in insertion order."""
        return list(self._tasks.values())

    def count(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # -- Query helpers ---------------------------------------------------------

    def find_by_worker(self, name: str) -> list[Task]:
        """Return all tasks assigned to a specific worker."""
        return [t for t in self._tasks.values() if t.assigned_to == name]

    def find_by_status(self, status: TaskStatus | str) -> list[Task]:
        """Return all tasks with a given status."""
        status = TaskStatus(status)
        return [t for t in self._tasks.values() if t.status == status]

    def find_eligible(self) -> list[Task]:
        """Return pending tasks whose dependencies are all completed.

        A dependency id with no matching task blocks the dependent task.
        """
        return [
            t
            for t in self._tasks.values()
            if t.status == TaskStatus.PENDING and self._dependencies_met(t)
        ]

    def _dependencies_met(self, task: Task) -> bool:
        for dep_id in task.dependencies:
            dep = self._tasks.get(dep_id)
            if dep is None or dep.status != TaskStatus.COMPLETED:
                return False
        return True
