"""Worker registry: name → worker lookup used at dispatch time."""

from __future__ import annotations

import logging

from devcrew.workers.base import Worker

logger = logging.getLogger("devcrew.workers.registry")


class WorkerRegistry:
    """Maps worker names to worker instances.

    The scheduler only reads from it; registration is an administrative
    concern of whoever builds the crew.
    """

    def __init__(self, workers: list[Worker] | None = None) -> None:
        self._workers: dict[str, Worker] = {}
        for worker in workers or []:
            self.register(worker)

    def register(self, worker: Worker, *, replace: bool = False) -> Worker:
        """Add a worker under ``worker.name``."""
        name = worker.name
        if not name:
            raise ValueError("Worker name is required")
        if name in self._workers and not replace:
            raise ValueError(f"Worker already registered: {name}")
        self._workers[name] = worker
        logger.debug("Registered worker %s", name)
        return worker

    def unregister(self, name: str) -> bool:
        """Remove a worker by name. Returns True if it existed."""
        if name in self._workers:
            del self._workers[name]
            return True
        return False

    def resolve(self, name: str) -> Worker | None:
        """Return the worker registered as ``name``, or None."""
        return self._workers.get(name)

    def names(self) -> list[str]:
        return list(self._workers)

    def all(self) -> list[Worker]:
        return list(self._workers.values())

    def __contains__(self, name: object) -> bool:
        return name in self._workers

    def __len__(self) -> int:
        return len(self._workers)
