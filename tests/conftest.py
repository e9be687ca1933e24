"""Shared test fixtures."""

from __future__ import annotations

import pytest

from devcrew.config.models import SchedulerConfig
from devcrew.errors.handler import ErrorHandler
from devcrew.memory.context import ContextMemory
from devcrew.scheduler.engine import SchedulerEngine
from devcrew.scheduler.ticker import ManualTicker
from devcrew.tasks.store import TaskStore
from devcrew.workers.registry import WorkerRegistry


@pytest.fixture
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture
def memory() -> ContextMemory:
    return ContextMemory()


@pytest.fixture
def error_handler(memory: ContextMemory) -> ErrorHandler:
    return ErrorHandler(memory)


@pytest.fixture
def registry() -> WorkerRegistry:
    return WorkerRegistry()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def scheduler_config() -> SchedulerConfig:
    """Fast settings: no retry delay, unbounded concurrency."""
    return SchedulerConfig(tick_interval_seconds=5.0, max_attempts=3, retry_delay_seconds=0.0)


@pytest.fixture
def engine(
    store: TaskStore,
    registry: WorkerRegistry,
    error_handler: ErrorHandler,
    scheduler_config: SchedulerConfig,
    ticker: ManualTicker,
) -> SchedulerEngine:
    return SchedulerEngine(
        store,
        registry,
        error_handler,
        config=scheduler_config,
        ticker=ticker,
    )
