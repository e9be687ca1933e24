"""Error taxonomy, retry policy and error log."""

from devcrew.errors.exceptions import (
    DevcrewError,
    InvalidTransitionError,
    PlanError,
    WorkerNotFoundError,
)
from devcrew.errors.handler import ErrorHandler, ErrorRecord

__all__ = [
    "DevcrewError",
    "ErrorHandler",
    "ErrorRecord",
    "InvalidTransitionError",
    "PlanError",
    "WorkerNotFoundError",
]
