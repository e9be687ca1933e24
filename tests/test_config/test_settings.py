"""Tests for config system."""

import json
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from devcrew.config.models import SchedulerConfig
from devcrew.config.settings import Settings


def test_default_settings(tmp_path):
    """Settings should have sane defaults when no config file exists."""
    fake_config = tmp_path / "config.json"
    with patch("devcrew.config.settings.CONFIG_FILE", fake_config):
        s = Settings()
        assert s.scheduler.tick_interval_seconds == 5.0
        assert s.scheduler.max_concurrent_tasks is None
        assert s.scheduler.max_attempts == 3
        assert s.scheduler.retry_delay_seconds == 1.0
        assert len(s.team.members) == 5
        assert s.log_level == "INFO"


def test_settings_override(tmp_path):
    """Explicit values should override defaults."""
    with patch("devcrew.config.settings.CONFIG_FILE", tmp_path / "config.json"):
        s = Settings(
            scheduler=SchedulerConfig(max_concurrent_tasks=2),
            log_level="DEBUG",
        )
    assert s.scheduler.max_concurrent_tasks == 2
    assert s.log_level == "DEBUG"


def test_config_file_is_merged(tmp_path):
    """Values from config.json should be picked up."""
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"scheduler": {"max_concurrent_tasks": 3, "tick_interval_seconds": 0.5}}),
        encoding="utf-8",
    )
    with patch("devcrew.config.settings.CONFIG_FILE", config_path):
        s = Settings()
    assert s.scheduler.max_concurrent_tasks == 3
    assert s.scheduler.tick_interval_seconds == 0.5


def test_explicit_values_beat_config_file(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"log_level": "WARNING"}), encoding="utf-8")
    with patch("devcrew.config.settings.CONFIG_FILE", config_path):
        s = Settings(log_level="ERROR")
    assert s.log_level == "ERROR"


def test_corrupt_config_file_is_ignored(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text("{oops", encoding="utf-8")
    with patch("devcrew.config.settings.CONFIG_FILE", config_path):
        s = Settings()
    assert s.scheduler.max_attempts == 3


def test_env_override(tmp_path, monkeypatch):
    """DEVCREW_ variables with __ nesting should reach sub-configs."""
    monkeypatch.setenv("DEVCREW_SCHEDULER__MAX_CONCURRENT_TASKS", "4")
    monkeypatch.setenv("DEVCREW_LOG_LEVEL", "DEBUG")
    with patch("devcrew.config.settings.CONFIG_FILE", tmp_path / "config.json"):
        s = Settings()
    assert s.scheduler.max_concurrent_tasks == 4
    assert s.log_level == "DEBUG"


def test_settings_save_and_load(tmp_path):
    """Config should round-trip through JSON."""
    config_path = tmp_path / "nested" / "config.json"
    with patch("devcrew.config.settings.CONFIG_FILE", config_path):
        assert Settings.config_exists() is False
        Settings(scheduler=SchedulerConfig(max_attempts=5)).save()
        assert Settings.config_exists() is True

        loaded = Settings()
    assert loaded.scheduler.max_attempts == 5
    assert [m.name for m in loaded.team.members][0] == "intern"


def test_invalid_scheduler_section(tmp_path):
    with patch("devcrew.config.settings.CONFIG_FILE", tmp_path / "config.json"):
        with pytest.raises(ValidationError):
            Settings(scheduler={"max_attempts": 0})
