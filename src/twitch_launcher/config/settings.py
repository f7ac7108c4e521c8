"""Runtime settings loaded from environment variables.

Uses Pydantic Settings v2.  These are operator knobs (timeouts, cooldowns,
executable names); the user's channel list and Twitch credentials live in
the JSON file handled by :mod:`twitch_launcher.config.app_config`, whose
location is :attr:`Settings.config_path`.

Usage::

    from twitch_launcher.config.settings import get_settings

    settings = get_settings()
    timeout = settings.request_timeout
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH: Path = Path.home() / ".config" / "twitch-launcher" / "config.json"


class Settings(BaseSettings):
    """Launcher configuration backed by ``TWITCH_LAUNCHER_*`` environment variables.

    Every field has a default, so the launcher starts with an empty
    environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="TWITCH_LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Files and logging
    # ------------------------------------------------------------------

    config_path: Path = DEFAULT_CONFIG_PATH
    """Location of the user's JSON config (credentials, channels, interval)."""

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    # ------------------------------------------------------------------
    # Helix API client
    # ------------------------------------------------------------------

    request_timeout: float = Field(default=10.0, gt=0)
    """Per-request timeout in seconds.  Exceeding it surfaces as ``NetworkError``."""

    connect_retries: int = Field(default=2, ge=0)
    """Connection attempts the transport retries before giving up.  Lets a
    refresh ride out a brief loss of connectivity instead of failing at once."""

    helix_batch_size: int = Field(default=100, ge=1, le=100)
    """Channels per ``GET /streams`` call.  Helix rejects more than 100."""

    max_rate_limit_attempts: int = Field(default=3, ge=1)
    """Attempts per batch while the API keeps answering HTTP 429."""

    # ------------------------------------------------------------------
    # Launcher
    # ------------------------------------------------------------------

    launch_cooldown_seconds: float = Field(default=5.0, ge=0)
    """Minimum seconds between two launches of the same channel."""

    streamlink_executable: str = "streamlink"
    """Executable name searched on ``PATH`` and the usual install prefixes."""

    streamlink_quality: str = "best"
    """Stream quality argument handed to streamlink."""


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton.

    In tests, call ``get_settings.cache_clear()`` after patching environment
    variables.
    """
    return Settings()
