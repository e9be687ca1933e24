"""Configuration: pydantic-settings backed, env + config.json."""

from devcrew.config.models import MemberConfig, SchedulerConfig, TeamConfig
from devcrew.config.settings import Settings, get_settings

__all__ = ["MemberConfig", "SchedulerConfig", "Settings", "TeamConfig", "get_settings"]
