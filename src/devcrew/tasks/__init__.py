"""Task subsystem: task entity, in-memory store and plan files."""

from devcrew.tasks.models import Task, TaskPriority, TaskStatus
from devcrew.tasks.store import TaskStore

__all__ = ["Task", "TaskPriority", "TaskStatus", "TaskStore"]
