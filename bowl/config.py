"""Centralised configuration loaded from environment / .env file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings, sourced from ``BOWL_*`` env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="BOWL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gameplay
    turn_seconds: int = Field(default=60, ge=1, description="Turn length for new sessions")

    # Persistence
    storage_dir: Path = Field(
        default_factory=lambda: Path.home() / ".bowl" / "storage",
        description="Directory of the file-backed key-value store",
    )
    key_prefix: str = "bowl:"

    debug: bool = False


settings = Settings()


def configure_logging(debug: bool | None = None) -> None:
    """Install a root handler for the host process."""
    if debug is None:
        debug = settings.debug
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
