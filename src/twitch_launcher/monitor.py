"""Refresh loop and presentation state for the monitored channel list.

:class:`StreamMonitor` is the caller that composes the status client with
the user's config: it refreshes on demand or on a timer, keeps the latest
list, and turns client failures into user-facing messages.  It never
touches the launcher.
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

import structlog

from twitch_launcher.config.app_config import AppConfig
from twitch_launcher.core.exceptions import StreamStatusError
from twitch_launcher.core.logging_config import refresh_id_var
from twitch_launcher.models import StreamStatus
from twitch_launcher.twitch.client import StreamStatusClient

logger = structlog.get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = (
    "Configure API credentials in the config file (client_id and access_token)."
)

UpdateCallback = Callable[["StreamMonitor"], Awaitable[None]]


def sort_streams(streams: list[StreamStatus]) -> list[StreamStatus]:
    """Online channels first by viewers (descending), then offline by name."""
    online = sorted((s for s in streams if s.is_online), key=lambda s: -s.viewer_count)
    offline = sorted((s for s in streams if not s.is_online), key=lambda s: s.name.casefold())
    return online + offline


def _log_refresh_task_exit(task: asyncio.Task[None]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("auto_refresh.crashed", error=repr(exc), exc_info=exc)


class StreamMonitor:
    """Holds the latest statuses for the configured channels.

    Args:
        config: User configuration (credentials, channels, interval).
        client: Status client used for every refresh.
        on_update: Optional coroutine called after each completed refresh,
            successful or not.
    """

    def __init__(
        self,
        config: AppConfig,
        client: StreamStatusClient,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._on_update = on_update

        self.streams: list[StreamStatus] = []
        self.is_loading = False
        self.is_refreshing = False
        self.error: str | None = None
        self.last_refresh: datetime | None = None

        self._refresh_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def online_count(self) -> int:
        return sum(1 for s in self.streams if s.is_online)

    @property
    def is_busy(self) -> bool:
        return self.is_loading or self.is_refreshing

    def filtered_streams(self, search: str = "") -> list[StreamStatus]:
        """Sorted streams, optionally filtered by display name or game."""
        ordered = sort_streams(self.streams)
        needle = search.strip().casefold()
        if not needle:
            return ordered
        return [
            s
            for s in ordered
            if needle in s.display_name.casefold() or needle in s.game_name.casefold()
        ]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Fetch statuses once and replace :attr:`streams` wholesale.

        Does nothing while another refresh is running.  Failures are stored
        in :attr:`error`; the previous list is kept.
        """
        if self.is_busy:
            return

        if not self.config.has_valid_credentials:
            self.error = MISSING_CREDENTIALS_MESSAGE
            await self._notify()
            return

        background = bool(self.streams)
        if background:
            self.is_refreshing = True
        else:
            self.is_loading = True
        self.error = None

        token = refresh_id_var.set(uuid.uuid4().hex[:12])
        log = logger.bind(channels=len(self.config.channels), background=background)
        try:
            self.streams = await self._client.fetch_statuses(
                self.config.channels, self.config.credentials
            )
            self.last_refresh = datetime.now(timezone.utc)
            log.info("refresh.complete", online=self.online_count)
        except StreamStatusError as exc:
            self.error = exc.user_message
            log.warning("refresh.failed", kind=exc.kind.value, error=str(exc))
        finally:
            self.is_loading = False
            self.is_refreshing = False
            refresh_id_var.reset(token)

        await self._notify()

    def start_auto_refresh(self) -> asyncio.Task[None]:
        """Refresh now and then every ``refresh_interval`` seconds.

        Restarts the loop if it is already running.  Must be called from a
        running event loop.
        """
        if self._refresh_task is not None:
            self._refresh_task.cancel()
        self._refresh_task = asyncio.create_task(self._auto_refresh_loop())
        self._refresh_task.add_done_callback(_log_refresh_task_exit)
        return self._refresh_task

    async def run_auto_refresh(self) -> None:
        """Start the refresh loop and wait on it.

        Runs until cancelled.  An unexpected error inside a refresh or the
        update callback ends the loop and is re-raised here.
        """
        await self.start_auto_refresh()

    async def stop_auto_refresh(self) -> None:
        """Cancel the refresh loop, including any in-flight retry sleep."""
        task, self._refresh_task = self._refresh_task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def update_config(self, config: AppConfig) -> None:
        """Swap in a reloaded config; the next refresh uses it."""
        self.config = config

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _auto_refresh_loop(self) -> None:
        await self.refresh()
        while True:
            await asyncio.sleep(self.config.refresh_interval)
            await self.refresh()

    async def _notify(self) -> None:
        if self._on_update is not None:
            await self._on_update(self)
