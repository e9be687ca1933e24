"""Scheduler engine: turns eligible tasks into tracked worker executions."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from devcrew.config.models import SchedulerConfig
from devcrew.errors.exceptions import InvalidTransitionError, WorkerNotFoundError
from devcrew.errors.handler import ErrorHandler
from devcrew.scheduler.ticker import APSchedulerTicker, Ticker
from devcrew.tasks.models import Task, TaskStatus

if TYPE_CHECKING:
    from devcrew.tasks.store import TaskStore
    from devcrew.workers.base import Worker
    from devcrew.workers.registry import WorkerRegistry

logger = logging.getLogger("devcrew.scheduler.engine")

RESOLUTION_CONTEXT = "worker resolution"
EXECUTION_CONTEXT = "task execution"


class SchedulerEngine:
    """Periodically dispatches eligible tasks to their workers.

    Each tick:
      1. asks the store for eligible tasks (pending, dependencies completed),
      2. orders them by priority (stable, so ties keep creation order),
      3. takes as many as the concurrency ceiling leaves room for,
      4. marks each one in-progress *before* dispatching it.

    Worker executions run as asyncio tasks through ``ErrorHandler.retry`` and
    may outlive the tick (and ``stop()``) that launched them. Worker calls
    have no timeout, so a worker that never returns holds its slot forever.
    """

    def __init__(
        self,
        store: TaskStore,
        registry: WorkerRegistry,
        error_handler: ErrorHandler | None = None,
        *,
        config: SchedulerConfig | None = None,
        ticker: Ticker | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._errors = error_handler or ErrorHandler()
        self._config = config or SchedulerConfig()
        self._ticker = ticker or APSchedulerTicker()
        self._max_concurrent = self._config.max_concurrent_tasks
        self._running: set[str] = set()
        self._inflight: dict[str, asyncio.Task[None]] = {}

    # -- Lifecycle -------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._ticker.running

    def start(self) -> None:
        """Begin periodic ticking. No-op if already running."""
        if self._ticker.running:
            logger.debug("Scheduler is already running")
            return
        self._ticker.start(self._on_tick, self._config.tick_interval_seconds)
        logger.info(
            "Scheduler started (interval=%.2fs, max_concurrent=%s)",
            self._config.tick_interval_seconds,
            self._max_concurrent if self._max_concurrent is not None else "unbounded",
        )

    def stop(self) -> None:
        """Stop future ticks. In-flight executions keep running. No-op if stopped."""
        if not self._ticker.running:
            logger.debug("Scheduler is not running")
            return
        self._ticker.stop()
        logger.info("Scheduler stopped (%d task(s) still in flight)", len(self._running))

    # -- Administration --------------------------------------------------------

    @property
    def max_concurrent_tasks(self) -> int | None:
        return self._max_concurrent

    def set_max_concurrent_tasks(self, limit: int | None) -> None:
        """Change the concurrency ceiling. ``None`` removes it.

        Lowering the ceiling never preempts tasks already dispatched.
        """
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise ValueError(f"max_concurrent_tasks must be a positive integer or None, got {limit!r}")
        self._max_concurrent = limit
        logger.info("Max concurrent tasks set to %s", limit if limit is not None else "unbounded")

    @property
    def running_task_ids(self) -> frozenset[str]:
        return frozenset(self._running)

    def is_idle(self) -> bool:
        """True when nothing is in flight and nothing is eligible to start."""
        return not self._running and not self._store.find_eligible()

    async def wait_idle(self) -> None:
        """Wait for every in-flight execution to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight.values()), return_exceptions=True)

    # -- Scheduling ------------------------------------------------------------

    async def _on_tick(self) -> None:
        self.tick()

    def tick(self) -> list[Task]:
        """Run one selection pass and return the tasks dispatched by it.

        Runs synchronously from start to finish; worker executions are
        scheduled on the running event loop. Raises ``RuntimeError`` when
        called outside one, before any task state is touched.
        """
        loop = asyncio.get_running_loop()
        eligible = self._store.find_eligible()
        if not eligible:
            logger.debug("No tasks to schedule")
            return []

        ordered = sorted(eligible, key=lambda t: t.priority.rank, reverse=True)

        if self._max_concurrent is None:
            capacity = len(ordered)
        else:
            capacity = self._max_concurrent - len(self._running)
        if capacity <= 0:
            logger.debug(
                "At capacity (%d running), %d eligible task(s) waiting",
                len(self._running),
                len(ordered),
            )
            return []

        selected = ordered[:capacity]
        logger.debug("Dispatching %d of %d eligible task(s)", len(selected), len(ordered))
        for task in selected:
            self._dispatch(task, loop)
        return selected

    def _dispatch(self, task: Task, loop: asyncio.AbstractEventLoop) -> None:
        self._store.update_status(task.id, TaskStatus.IN_PROGRESS)
        self._running.add(task.id)

        worker = self._registry.resolve(task.assigned_to)
        if worker is None:
            exc = WorkerNotFoundError(task.assigned_to, task.id)
            self._errors.record(exc, RESOLUTION_CONTEXT, task.assigned_to)
            self._finish(task.id, TaskStatus.FAILED, error=str(exc))
            return

        logger.info("Processing task %s (%s) -> %s", task.id, task.title, worker.name)
        self._inflight[task.id] = loop.create_task(
            self._execute(task, worker), name=f"devcrew:{task.id}"
        )

    async def _execute(self, task: Task, worker: Worker) -> None:
        attempts = 0

        async def attempt() -> str:
            nonlocal attempts
            attempts += 1
            return await worker.execute(task.description)

        try:
            result = await self._errors.retry(
                attempt,
                max_attempts=self._config.max_attempts,
                delay_seconds=self._config.retry_delay_seconds,
            )
        except Exception as exc:
            self._errors.record(exc, EXECUTION_CONTEXT, task.assigned_to, retry_count=attempts)
            self._finish(
                task.id,
                TaskStatus.FAILED,
                error=str(exc) or type(exc).__name__,
                attempts=attempts,
            )
        else:
            logger.info("Task %s completed after %d attempt(s)", task.id, attempts)
            self._finish(task.id, TaskStatus.COMPLETED, result=str(result), attempts=attempts)
        finally:
            self._inflight.pop(task.id, None)

    def _finish(self, task_id: str, status: TaskStatus, **fields) -> None:
        """Record the outcome and free the slot."""
        try:
            if self._store.update_status(task_id, status, **fields) is None:
                logger.warning("Task %s was removed before its outcome (%s) was recorded", task_id, status.value)
        except InvalidTransitionError:
            logger.warning("Task %s changed state during execution; outcome %s dropped", task_id, status.value)
        finally:
            self._running.discard(task_id)
