"""Configuration package for Twitch Launcher.

Re-exports the most commonly used configuration symbols so that callers
can write::

    from twitch_launcher.config import AppConfig, get_settings
"""

from __future__ import annotations

from twitch_launcher.config.app_config import AppConfig
from twitch_launcher.config.settings import DEFAULT_CONFIG_PATH, Settings, get_settings

__all__ = [
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
    "Settings",
    "get_settings",
]
