"""Default crew roster and an offline worker implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from devcrew.workers.base import BaseWorker
from devcrew.workers.registry import WorkerRegistry

if TYPE_CHECKING:
    from devcrew.config.models import MemberConfig
    from devcrew.memory.context import ContextMemory

logger = logging.getLogger("devcrew.workers.team")


class EchoWorker(BaseWorker):
    """Deterministic local worker: acknowledges the task after an optional delay.

    Useful for demos and dry runs of a task plan without any external backend.
    """

    def __init__(
        self,
        name: str,
        role: str = "",
        description: str = "",
        memory: ContextMemory | None = None,
        *,
        work_seconds: float = 0.0,
    ) -> None:
        super().__init__(name, role, description, memory)
        self.work_seconds = work_seconds

    async def _run(self, description: str) -> str:
        if self.work_seconds > 0:
            await asyncio.sleep(self.work_seconds)
        label = self.role or self.name
        return f"[{label}] done: {description}"


def build_team(
    members: Iterable[MemberConfig],
    memory: ContextMemory | None = None,
    *,
    work_seconds: float = 0.0,
) -> WorkerRegistry:
    """Create an ``EchoWorker`` per configured member and register them."""
    registry = WorkerRegistry()
    for member in members:
        registry.register(
            EchoWorker(
                member.name,
                member.role,
                member.description,
                memory,
                work_seconds=work_seconds,
            )
        )
    logger.debug("Built team: %s", ", ".join(registry.names()))
    return registry
