"""Pydantic models for configuration sub-sections."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from devcrew.config.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TEAM,
    DEFAULT_TICK_INTERVAL_SECONDS,
)


class SchedulerConfig(BaseModel):
    """Scheduling loop settings. All durations are in seconds."""

    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    max_concurrent_tasks: int | None = None  # None = explicitly unbounded
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS

    @model_validator(mode="after")
    def validate_limits(self) -> "SchedulerConfig":
        if self.tick_interval_seconds <= 0:
            raise ValueError(
                f"tick_interval_seconds must be positive, got {self.tick_interval_seconds}"
            )
        if self.max_concurrent_tasks is not None and self.max_concurrent_tasks < 1:
            raise ValueError(
                f"max_concurrent_tasks must be >= 1 or unset, got {self.max_concurrent_tasks}"
            )
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.retry_delay_seconds < 0:
            raise ValueError(
                f"retry_delay_seconds must be >= 0, got {self.retry_delay_seconds}"
            )
        return self


class MemberConfig(BaseModel):
    """Configuration for a single crew member (worker)."""

    name: str
    role: str = ""
    description: str = ""


def _default_members() -> list[MemberConfig]:
    return [
        MemberConfig(name=name, role=role, description=description)
        for name, role, description in DEFAULT_TEAM
    ]


class TeamConfig(BaseModel):
    """Crew roster registered with the worker registry at startup."""

    members: list[MemberConfig] = Field(default_factory=_default_members)

    @model_validator(mode="after")
    def validate_unique_names(self) -> "TeamConfig":
        seen: set[str] = set()
        for member in self.members:
            if member.name in seen:
                raise ValueError(f"Duplicate team member name: {member.name}")
            seen.add(member.name)
        return self
