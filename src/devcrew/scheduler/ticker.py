"""Ticking interface: what drives the scheduler's periodic selection pass."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from devcrew.config.constants import TICK_JOB_ID

logger = logging.getLogger("devcrew.scheduler.ticker")

TickCallback = Callable[[], Awaitable[None]]


class Ticker(Protocol):
    """Calls a coroutine function at a fixed interval until stopped."""

    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback, interval_seconds: float) -> None: ...

    def stop(self) -> None: ...


class APSchedulerTicker:
    """Production ticker backed by APScheduler's ``AsyncIOScheduler``.

    The tick job is registered with ``max_instances=1`` and ``coalesce=True``
    so two ticks never run at once and missed ticks collapse into one.
    Must be started from inside a running event loop. Stopping shuts the
    underlying scheduler down; starting again uses a new one.
    """

    def __init__(self, scheduler: AsyncIOScheduler | None = None) -> None:
        self._scheduler = scheduler or AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running and self._scheduler.get_job(TICK_JOB_ID) is not None

    def start(self, callback: TickCallback, interval_seconds: float) -> None:
        if self.running:
            return
        self._scheduler.add_job(
            callback,
            trigger=IntervalTrigger(seconds=interval_seconds),
            id=TICK_JOB_ID,
            name="devcrew scheduling tick",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.debug("Tick job registered every %.2fs", interval_seconds)

    def stop(self) -> None:
        with contextlib.suppress(JobLookupError):
            self._scheduler.remove_job(TICK_JOB_ID)
        if self._scheduler.running:
            # shutdown() only runs on the next loop iteration; never reuse this instance.
            self._scheduler.shutdown(wait=False)
            self._scheduler = AsyncIOScheduler()

    def job_count(self) -> int:
        return len(self._scheduler.get_jobs())


class ManualTicker:
    """Ticker driven by hand: each ``await tick()`` runs one scheduling pass."""

    def __init__(self) -> None:
        self._callback: TickCallback | None = None
        self.interval_seconds: float | None = None
        self.start_count = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback, interval_seconds: float) -> None:
        if self.running:
            return
        self._callback = callback
        self.interval_seconds = interval_seconds
        self.start_count += 1

    def stop(self) -> None:
        self._callback = None

    async def tick(self) -> None:
        if self._callback is None:
            raise RuntimeError("Ticker is not running")
        await self._callback()
