"""Process launcher: opens a channel in an external player via streamlink.

Re-exports the public symbols so callers can write::

    from twitch_launcher.launcher import ProcessLauncher
"""

from __future__ import annotations

from twitch_launcher.launcher.discovery import find_executable
from twitch_launcher.launcher.process import ProcessLauncher

__all__ = [
    "ProcessLauncher",
    "find_executable",
]
