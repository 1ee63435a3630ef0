"""
Tests for settings and logging setup.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from ..config import Settings, configure_logging


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("BOWL_TURN_SECONDS", "BOWL_STORAGE_DIR", "BOWL_KEY_PREFIX", "BOWL_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.turn_seconds == 60
        assert config.storage_dir == Path.home() / ".bowl" / "storage"
        assert config.key_prefix == "bowl:"
        assert not config.debug

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BOWL_TURN_SECONDS", "45")
        monkeypatch.setenv("BOWL_STORAGE_DIR", str(tmp_path))
        monkeypatch.setenv("BOWL_KEY_PREFIX", "test:")
        monkeypatch.setenv("BOWL_DEBUG", "true")

        config = Settings(_env_file=None)

        assert config.turn_seconds == 45
        assert config.storage_dir == tmp_path
        assert config.key_prefix == "test:"
        assert config.debug

    def test_turn_seconds_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("BOWL_TURN_SECONDS", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestConfigureLogging:

    def test_level_follows_debug_flag(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging(debug=True)
        configure_logging(debug=False)

        assert [c["level"] for c in calls] == [logging.DEBUG, logging.INFO]
