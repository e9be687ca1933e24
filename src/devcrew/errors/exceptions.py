"""Exception hierarchy for devcrew."""

from __future__ import annotations


class DevcrewError(Exception):
    """Base class for all devcrew errors."""


class WorkerNotFoundError(DevcrewError):
    """A task's ``assigned_to`` name did not resolve to a registered worker."""

    def __init__(self, worker_name: str, task_id: str | None = None) -> None:
        self.worker_name = worker_name
        self.task_id = task_id
        suffix = f" for task {task_id}" if task_id else ""
        super().__init__(f"Worker '{worker_name}' not found{suffix}")


class InvalidTransitionError(DevcrewError):
    """A status write that the task state machine does not allow."""

    def __init__(self, task_id: str, current: str, requested: str) -> None:
        self.task_id = task_id
        self.current = current
        self.requested = requested
        super().__init__(f"Task {task_id}: cannot move from '{current}' to '{requested}'")


class PlanError(DevcrewError):
    """A task plan file could not be loaded or submitted."""
