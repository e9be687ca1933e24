"""Worker capability protocol and the crew member base class."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from devcrew.memory.context import EntryKind

if TYPE_CHECKING:
    from devcrew.memory.context import ContextMemory

logger = logging.getLogger("devcrew.workers.base")


@runtime_checkable
class Worker(Protocol):
    """Anything that can take a task description and produce a result string."""

    name: str

    async def execute(self, description: str) -> str: ...


class BaseWorker:
    """A named crew member with an execution history.

    Subclasses implement ``_run``. ``execute`` wraps it with bookkeeping:
    the task and its outcome are appended to the history and, when a shared
    ``ContextMemory`` is attached, to the memory log. Faults propagate.
    """

    def __init__(
        self,
        name: str,
        role: str = "",
        description: str = "",
        memory: ContextMemory | None = None,
    ) -> None:
        self.name = name
        self.role = role
        self.description = description
        self._memory = memory
        self.history: list[str] = []

    async def execute(self, description: str) -> str:
        logger.info("%s (%s) executing: %s", self.name, self.role or "worker", description[:80])
        self._remember(EntryKind.TASK, description)
        try:
            result = await self._run(description)
        except Exception as exc:
            self.history.append(f"Task: {description}\nError: {exc}")
            self._remember(EntryKind.OBSERVATION, f"Failed: {exc}", tags={"failure"})
            raise
        self.history.append(f"Task: {description}\nResult: {result}")
        self._remember(EntryKind.RESULT, result)
        return result

    async def _run(self, description: str) -> str:
        raise NotImplementedError

    def recent_history(self, n: int) -> list[str]:
        """Return the last ``n`` history entries."""
        if n <= 0:
            return []
        return self.history[-n:]

    def _remember(self, kind: EntryKind, content: str, tags: set[str] | None = None) -> None:
        if self._memory is not None:
            self._memory.append(self.name, kind, content, tags)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, role={self.role!r})"
