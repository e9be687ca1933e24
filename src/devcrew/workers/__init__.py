"""Workers: the capability protocol, the registry and the default crew."""

from devcrew.workers.base import BaseWorker, Worker
from devcrew.workers.registry import WorkerRegistry
from devcrew.workers.team import EchoWorker, build_team

__all__ = ["BaseWorker", "EchoWorker", "Worker", "WorkerRegistry", "build_team"]
