"""Launch Twitch streams in an external player via streamlink.

Detached process behaviour
--------------------------
The spawned ``streamlink`` process runs in its own session with stdin,
stdout and stderr attached to the null device.  It is not tracked, awaited
or terminated: closing the launcher leaves the player window open.

Cooldown
--------
Each channel (compared case-insensitively) can be launched at most once per
cooldown window, 5 seconds by default, so a double click opens one player.
The launch time is recorded *before* the executable is resolved and the
process started, and the check-and-record step runs under a lock, so two
near-simultaneous launches cannot both get through.  If the launch then
fails the record is removed again and the user can retry immediately.

The cooldown outcome is raised as :class:`LaunchRateLimitedError`, whose
``user_message`` is ``None``: callers are expected to ignore it.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from twitch_launcher.core.exceptions import (
    ExecutableNotFoundError,
    LaunchFailedError,
    LaunchRateLimitedError,
)
from twitch_launcher.launcher.discovery import STREAMLINK_EXECUTABLE, find_executable
from twitch_launcher.models import canonical_channel
from twitch_launcher.twitch.urls import channel_url

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS: float = 5.0
DEFAULT_QUALITY: str = "best"


class ProcessLauncher:
    """Starts streamlink for a channel, enforcing a per-channel cooldown.

    Args:
        cooldown_seconds: Minimum seconds between launches of one channel.
        executable: Name of the streamlink executable to look for.
        quality: Quality argument passed after the channel URL.
        clock: Monotonic clock used for cooldown bookkeeping.
        finder: Executable lookup, called off the event loop thread with
            the executable name.  Returns a path or ``None``.
    """

    def __init__(
        self,
        *,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        executable: str = STREAMLINK_EXECUTABLE,
        quality: str = DEFAULT_QUALITY,
        clock: Callable[[], float] = time.monotonic,
        finder: Callable[[str], Path | None] = find_executable,
    ) -> None:
        self.cooldown_seconds = cooldown_seconds
        self.executable = executable
        self.quality = quality
        self._clock = clock
        self._finder = finder
        # canonical channel -> clock() value of the last launch attempt
        self._last_launch: dict[str, float] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Any) -> ProcessLauncher:
        """Build a launcher from a :class:`~twitch_launcher.config.settings.Settings`."""
        return cls(
            cooldown_seconds=settings.launch_cooldown_seconds,
            executable=settings.streamlink_executable,
            quality=settings.streamlink_quality,
        )

    async def launch(self, channel: str) -> None:
        """Open *channel* in streamlink's configured player.

        Args:
            channel: Channel login in any casing.  The casing is kept in the
                URL passed to streamlink.

        Raises:
            LaunchRateLimitedError: The channel was launched less than
                ``cooldown_seconds`` ago.  Nothing else happens.
            ExecutableNotFoundError: streamlink is not installed.
            LaunchFailedError: The operating system refused to start it, or
                the arguments could not be passed to it.
        """
        key = canonical_channel(channel)
        stamp = self._claim(key)

        launched = False
        try:
            found = await asyncio.to_thread(self._finder, self.executable)
            if found is None:
                logger.warning("launcher: %s not found on PATH or usual locations", self.executable)
                raise ExecutableNotFoundError(self.executable)

            path = Path(found)
            argv = [str(path), channel_url(channel), self.quality]
            try:
                process = self._spawn(argv)
            except (OSError, ValueError) as exc:
                # ValueError: arguments Popen refuses, e.g. an embedded NUL
                logger.error("launcher: failed to start %s: %s", path, exc)
                raise LaunchFailedError(exc) from exc

            launched = True
            logger.info("launcher: started %s for %s (pid %s)", path.name, channel, process.pid)
        finally:
            if not launched:
                self._release(key, stamp)

    def remaining_cooldown(self, channel: str) -> float:
        """Seconds until *channel* may be launched again; ``0.0`` if it may now."""
        with self._lock:
            last = self._last_launch.get(canonical_channel(channel))
        if last is None:
            return 0.0
        return max(0.0, self.cooldown_seconds - (self._clock() - last))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _claim(self, key: str) -> float:
        """Check the cooldown and record a new launch attempt atomically."""
        with self._lock:
            now = self._clock()
            last = self._last_launch.get(key)
            if last is not None and now - last < self.cooldown_seconds:
                remaining = self.cooldown_seconds - (now - last)
                logger.debug("launcher: %s in cooldown (%.1fs left)", key, remaining)
                raise LaunchRateLimitedError(key, remaining)
            self._last_launch[key] = now
            return now

    def _release(self, key: str, stamp: float) -> None:
        """Forget a failed attempt so it does not hold the cooldown."""
        with self._lock:
            if self._last_launch.get(key) == stamp:
                del self._last_launch[key]

    def _spawn(self, argv: list[str]) -> subprocess.Popen[bytes]:
        return subprocess.Popen(  # noqa: S603
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
