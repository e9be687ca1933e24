"""Retry policy and in-memory error log."""

from __future__ import annotations

import asyncio
import logging
import secrets
import traceback
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, Field

from devcrew.config.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY_SECONDS
from devcrew.memory.context import EntryKind

if TYPE_CHECKING:
    from devcrew.memory.context import ContextMemory

logger = logging.getLogger("devcrew.errors.handler")

T = TypeVar("T")


def _generate_id() -> str:
    return secrets.token_hex(6)


class ErrorRecord(BaseModel):
    """A recorded fault."""

    id: str = Field(default_factory=_generate_id)
    message: str
    error_type: str = ""
    trace: str | None = None
    context: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    worker: str | None = None
    retry_count: int | None = None
    resolved: bool = False


class ErrorHandler:
    """Wraps async operations with bounded retry and keeps a log of faults.

    When a ``ContextMemory`` is supplied, faults recorded against a worker are
    mirrored into that worker's memory tagged ``error`` plus the context label.
    """

    def __init__(self, memory: ContextMemory | None = None) -> None:
        self._memory = memory
        self._errors: list[ErrorRecord] = []

    # -- Retry -----------------------------------------------------------------

    async def retry(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS,
    ) -> T:
        """Await ``operation()`` up to ``max_attempts`` times.

        Sleeps ``delay_seconds`` between failed attempts. The last exception is
        re-raised once every attempt has failed.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        attempt = 1
        while True:
            try:
                return await operation()
            except Exception as exc:
                if attempt >= max_attempts:
                    logger.debug("Giving up after %d attempts: %s", attempt, exc)
                    raise
                logger.warning(
                    "Attempt %d/%d failed: %s (retrying in %.2fs)",
                    attempt,
                    max_attempts,
                    exc,
                    delay_seconds,
                )
                attempt += 1
                await asyncio.sleep(delay_seconds)

    # -- Error log -------------------------------------------------------------

    def record(
        self,
        error: BaseException,
        context: str,
        worker: str | None = None,
        *,
        retry_count: int | None = None,
    ) -> ErrorRecord:
        """Append a fault to the error log (and to the worker's memory, if any)."""
        trace = None
        if error.__traceback__ is not None:
            trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

        record = ErrorRecord(
            message=str(error) or type(error).__name__,
            error_type=type(error).__name__,
            trace=trace,
            context=context,
            worker=worker,
            retry_count=retry_count,
        )
        self._errors.append(record)
        logger.error("Error during %s%s: %s", context, f" ({worker})" if worker else "", record.message)

        if worker and self._memory is not None:
            self._memory.append(
                worker,
                EntryKind.OBSERVATION,
                f"Error during {context}: {record.message}",
                tags={"error", context},
            )
        return record

    def errors(self, worker: str | None = None) -> list[ErrorRecord]:
        """Return recorded faults, optionally only those for ``worker``."""
        if worker is None:
            return list(self._errors)
        return [e for e in self._errors if e.worker == worker]

    def unresolved(self, worker: str | None = None) -> list[ErrorRecord]:
        return [e for e in self.errors(worker) if not e.resolved]

    def resolve(self, record_id: str) -> ErrorRecord | None:
        """Mark a record resolved. Returns None if the id is unknown."""
        for record in self._errors:
            if record.id == record_id:
                record.resolved = True
                return record
        return None

    def clear(self, worker: str | None = None) -> int:
        """Drop faults for one worker, or the whole log. Returns how many were removed."""
        before = len(self._errors)
        if worker is None:
            self._errors.clear()
        else:
            self._errors = [e for e in self._errors if e.worker != worker]
        return before - len(self._errors)
