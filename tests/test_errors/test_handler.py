"""Tests for retry and the error log."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from devcrew.errors.exceptions import InvalidTransitionError, WorkerNotFoundError
from devcrew.errors.handler import ErrorHandler
from devcrew.memory.context import ContextMemory, EntryKind


@pytest.mark.asyncio
async def test_retry_returns_first_success(error_handler: ErrorHandler):
    op = AsyncMock(return_value="ok")
    assert await error_handler.retry(op, max_attempts=3, delay_seconds=0) == "ok"
    assert op.await_count == 1


@pytest.mark.asyncio
async def test_retry_until_success(error_handler: ErrorHandler):
    op = AsyncMock(side_effect=[ValueError("a"), ValueError("b"), "ok"])
    assert await error_handler.retry(op, max_attempts=3, delay_seconds=0) == "ok"
    assert op.await_count == 3


@pytest.mark.asyncio
async def test_retry_reraises_last_error(error_handler: ErrorHandler):
    op = AsyncMock(side_effect=[ValueError("first"), KeyError("second")])
    with pytest.raises(KeyError, match="second"):
        await error_handler.retry(op, max_attempts=2, delay_seconds=0)
    assert op.await_count == 2


@pytest.mark.asyncio
async def test_retry_sleeps_only_between_attempts(error_handler: ErrorHandler):
    op = AsyncMock(side_effect=RuntimeError("down"))
    with patch("devcrew.errors.handler.asyncio.sleep", new=AsyncMock()) as sleep:
        with pytest.raises(RuntimeError):
            await error_handler.retry(op, max_attempts=3, delay_seconds=1.5)
    assert sleep.await_count == 2
    sleep.assert_awaited_with(1.5)


@pytest.mark.asyncio
async def test_retry_rejects_zero_attempts(error_handler: ErrorHandler):
    op = AsyncMock()
    with pytest.raises(ValueError, match="max_attempts"):
        await error_handler.retry(op, max_attempts=0)
    op.assert_not_awaited()


def test_record_without_worker(error_handler: ErrorHandler, memory: ContextMemory):
    record = error_handler.record(RuntimeError("disk full"), "startup")
    assert record.message == "disk full"
    assert record.error_type == "RuntimeError"
    assert record.context == "startup"
    assert record.worker is None
    assert record.resolved is False
    assert len(memory) == 0


def test_record_mirrors_to_worker_memory(error_handler: ErrorHandler, memory: ContextMemory):
    error_handler.record(WorkerNotFoundError("ghost", "task-1"), "worker resolution", "ghost")

    [entry] = memory.find_by_owner("ghost")
    assert entry.kind == EntryKind.OBSERVATION
    assert entry.tags == frozenset({"error", "worker resolution"})
    assert entry.content == "Error during worker resolution: Worker 'ghost' not found for task task-1"


def test_record_captures_trace(error_handler: ErrorHandler):
    try:
        raise ValueError("bad")
    except ValueError as exc:
        record = error_handler.record(exc, "parsing")
    assert record.trace is not None
    assert "ValueError: bad" in record.trace


def test_record_empty_message_uses_type(error_handler: ErrorHandler):
    record = error_handler.record(TimeoutError(), "task execution", "intern", retry_count=3)
    assert record.message == "TimeoutError"
    assert record.retry_count == 3


def test_errors_filter_resolve_and_clear(error_handler: ErrorHandler):
    a = error_handler.record(RuntimeError("a"), "ctx", "intern")
    error_handler.record(RuntimeError("b"), "ctx", "senior")
    error_handler.record(RuntimeError("c"), "ctx", "intern")

    assert [e.message for e in error_handler.errors("intern")] == ["a", "c"]
    assert len(error_handler.errors()) == 3

    assert error_handler.resolve(a.id) is a
    assert a.resolved is True
    assert [e.message for e in error_handler.unresolved("intern")] == ["c"]
    assert error_handler.resolve("unknown") is None

    assert error_handler.clear("intern") == 2
    assert [e.message for e in error_handler.errors()] == ["b"]
    assert error_handler.clear() == 1


def test_handler_without_memory():
    handler = ErrorHandler()
    handler.record(RuntimeError("x"), "ctx", "intern")
    assert len(handler.errors()) == 1


def test_exception_messages():
    assert str(WorkerNotFoundError("ghost")) == "Worker 'ghost' not found"
    exc = InvalidTransitionError("task-1", "completed", "pending")
    assert exc.current == "completed"
    assert "cannot move from 'completed' to 'pending'" in str(exc)
