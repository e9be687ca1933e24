"""Paths and default values used across the project."""

from pathlib import Path

# Base directory for all devcrew data
DEVCREW_HOME = Path.home() / ".devcrew"

CONFIG_DIR = DEVCREW_HOME
CONFIG_FILE = CONFIG_DIR / "config.json"

# Scheduler defaults (seconds)
DEFAULT_TICK_INTERVAL_SECONDS = 5.0
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_MAX_ATTEMPTS = 3

# APScheduler job id for the recurring scheduling tick
TICK_JOB_ID = "__devcrew_tick__"

# Default crew roster: (name, role, description)
DEFAULT_TEAM: list[tuple[str, str, str]] = [
    (
        "intern",
        "Intern Developer",
        "Writes simple code snippets, documents existing code and runs basic tests.",
    ),
    (
        "junior",
        "Junior Developer",
        "Implements well-scoped features and fixes straightforward bugs.",
    ),
    (
        "senior",
        "Senior Developer",
        "Designs and implements complex features and reviews code.",
    ),
    (
        "architect",
        "Software Architect",
        "Makes system-wide design decisions and defines component boundaries.",
    ),
    (
        "micro-manager",
        "Project Coordinator",
        "Coordinates work between team members and tracks progress.",
    ),
]
