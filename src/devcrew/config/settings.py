"""Central settings: loads from ~/.devcrew/config.json + environment variables."""

from __future__ import annotations

import json
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from devcrew.config.constants import CONFIG_FILE, DEVCREW_HOME
from devcrew.config.models import SchedulerConfig, TeamConfig


class Settings(BaseSettings):
    """All devcrew configuration in one place.

    Priority (highest → lowest):
      1. Environment variables (DEVCREW_ prefix, ``__`` for nesting)
      2. .env file
      3. ~/.devcrew/config.json
      4. Defaults defined here
    """

    model_config = SettingsConfigDict(
        env_prefix="DEVCREW_",
        env_nested_delimiter="__",
        env_file=(".env", str(DEVCREW_HOME / ".env")),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Sub-configs ---
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    team: TeamConfig = Field(default_factory=TeamConfig)

    # --- Top-level settings ---
    log_level: str = "INFO"

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values: dict) -> dict:
        """Merge config.json values as defaults (explicit values still override)."""
        if CONFIG_FILE.exists():
            try:
                file_data = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
                if isinstance(file_data, dict):
                    values = {**file_data, **{k: v for k, v in values.items() if v is not None}}
            except (json.JSONDecodeError, OSError):
                pass
        return values

    def save(self) -> None:
        """Persist current settings to config.json."""
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        CONFIG_FILE.write_text(json.dumps(data, indent=2), encoding="utf-8")

    @classmethod
    def config_exists(cls) -> bool:
        return CONFIG_FILE.exists()


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
