"""Task plans: JSON files describing a batch of tasks and their dependencies."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from devcrew.errors.exceptions import PlanError
from devcrew.tasks.models import Task, TaskPriority

if TYPE_CHECKING:
    from devcrew.tasks.store import TaskStore

logger = logging.getLogger("devcrew.tasks.plan")


class PlanEntry(BaseModel):
    """One task in a plan file. ``depends_on`` refers to other entries' keys."""

    key: str
    title: str
    description: str = ""
    assigned_to: str
    priority: TaskPriority = TaskPriority.MEDIUM
    depends_on: list[str] = Field(default_factory=list)

    @field_validator("assigned_to")
    @classmethod
    def require_worker(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("assigned_to is required")
        return v


_plan_adapter = TypeAdapter(list[PlanEntry])


def parse_plan(data: object) -> list[PlanEntry]:
    """Validate raw JSON data into plan entries. Keys must be unique."""
    try:
        entries = _plan_adapter.validate_python(data)
    except ValidationError as exc:
        raise PlanError(f"Invalid plan: {exc}") from exc

    seen: set[str] = set()
    for entry in entries:
        if entry.key in seen:
            raise PlanError(f"Duplicate plan key: {entry.key}")
        seen.add(entry.key)
    return entries


def load_plan(path: Path) -> list[PlanEntry]:
    """Read and validate a plan file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise PlanError(f"Could not read plan {path}: {exc}") from exc
    return parse_plan(data)


def submit_plan(entries: list[PlanEntry], store: TaskStore) -> dict[str, Task]:
    """Create a task per entry and return them keyed by plan key.

    Entries may depend on keys defined later in the file. A ``depends_on``
    value that is not a plan key is passed through unchanged as a task id,
    so it only resolves if such a task already exists in the store.
    """
    # Build every task first so forward references can be mapped to ids.
    drafts = {
        entry.key: Task(
            title=entry.title,
            description=entry.description,
            assigned_to=entry.assigned_to,
            priority=entry.priority,
        )
        for entry in entries
    }
    ids = {key: draft.id for key, draft in drafts.items()}

    created: dict[str, Task] = {}
    for entry in entries:
        task = drafts[entry.key]
        task.dependencies = [ids.get(dep, dep) for dep in entry.depends_on]
        created[entry.key] = store.add(task)

    logger.info("Submitted plan with %d task(s)", len(created))
    return created
