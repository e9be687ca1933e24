"""Scheduler subsystem: ticking interface and engine."""

from devcrew.scheduler.engine import SchedulerEngine
from devcrew.scheduler.ticker import APSchedulerTicker, ManualTicker, Ticker

__all__ = ["APSchedulerTicker", "ManualTicker", "SchedulerEngine", "Ticker"]
