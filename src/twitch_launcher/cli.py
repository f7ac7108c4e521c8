"""Command-line entry point for Twitch Launcher.

Usage::

    twitch-launcher status [--search TEXT] [--online-only]
    twitch-launcher watch [--online-only]
    twitch-launcher launch CHANNEL
    twitch-launcher open CHANNEL
    twitch-launcher init-config

Global options ``--config PATH`` and ``--log-level LEVEL`` override the
``TWITCH_LAUNCHER_CONFIG_PATH`` and ``TWITCH_LAUNCHER_LOG_LEVEL`` settings.

Exit codes:
    0  Success (including a launch suppressed by the cooldown).
    1  The command failed (API error, streamlink missing, ...).
    2  The config file has no usable credentials.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import webbrowser
from collections.abc import Sequence
from pathlib import Path

from twitch_launcher.config.app_config import AppConfig
from twitch_launcher.config.settings import Settings, get_settings
from twitch_launcher.core.exceptions import ExecutableNotFoundError, LaunchError
from twitch_launcher.core.logging_config import configure_logging
from twitch_launcher.launcher.process import ProcessLauncher
from twitch_launcher.models import StreamStatus
from twitch_launcher.monitor import MISSING_CREDENTIALS_MESSAGE, StreamMonitor
from twitch_launcher.twitch.client import StreamStatusClient
from twitch_launcher.twitch.urls import STREAMLINK_DOCS, TWITCH_DEVELOPER_PORTAL, channel_url

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

_TITLE_WIDTH = 48


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def format_table(streams: Sequence[StreamStatus]) -> str:
    """Render statuses as a fixed-width text table."""
    if not streams:
        return "No channels configured."
    name_width = max(len(s.display_name) for s in streams)
    game_width = max([len(s.game_name) for s in streams] + [4])
    lines = []
    for s in streams:
        marker = "LIVE" if s.is_online else "    "
        viewers = s.formatted_viewers if s.is_online else "-"
        title = s.title if len(s.title) <= _TITLE_WIDTH else s.title[: _TITLE_WIDTH - 1] + "…"
        lines.append(
            f"{marker}  {s.display_name:<{name_width}}  {viewers:>6}  "
            f"{s.game_name:<{game_width}}  {title}".rstrip()
        )
    return "\n".join(lines)


def _print_streams(monitor: StreamMonitor, search: str, online_only: bool) -> None:
    streams = monitor.filtered_streams(search)
    if online_only:
        streams = [s for s in streams if s.is_online]
        if not streams:
            print("No channels live.")
            print(f"\n0/{len(monitor.streams)} online")
            return
    print(format_table(streams))
    print(f"\n{monitor.online_count}/{len(monitor.streams)} online")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_status(settings: Settings, config: AppConfig, args: argparse.Namespace) -> int:
    if not config.has_valid_credentials:
        print(f"{MISSING_CREDENTIALS_MESSAGE}\nConfig: {settings.config_path}", file=sys.stderr)
        print(f"Register an application at {TWITCH_DEVELOPER_PORTAL}", file=sys.stderr)
        return EXIT_CONFIG

    async with StreamStatusClient.from_settings(settings) as client:
        monitor = StreamMonitor(config, client)
        await monitor.refresh()

    if monitor.error:
        print(monitor.error, file=sys.stderr)
        return EXIT_FAILURE
    _print_streams(monitor, args.search, args.online_only)
    return EXIT_OK


async def _cmd_watch(settings: Settings, config: AppConfig, args: argparse.Namespace) -> int:
    if not config.has_valid_credentials:
        print(f"{MISSING_CREDENTIALS_MESSAGE}\nConfig: {settings.config_path}", file=sys.stderr)
        return EXIT_CONFIG

    async def on_update(monitor: StreamMonitor) -> None:
        stamp = monitor.last_refresh.astimezone().strftime("%H:%M:%S") if monitor.last_refresh else "--"
        print(f"\n=== {stamp} ===")
        if monitor.error:
            print(monitor.error, file=sys.stderr)
        _print_streams(monitor, "", args.online_only)

    async with StreamStatusClient.from_settings(settings) as client:
        monitor = StreamMonitor(config, client, on_update=on_update)
        try:
            await monitor.run_auto_refresh()
        finally:
            await monitor.stop_auto_refresh()
    return EXIT_OK


async def _cmd_launch(settings: Settings, config: AppConfig, args: argparse.Namespace) -> int:
    launcher = ProcessLauncher.from_settings(settings)
    try:
        await launcher.launch(args.channel)
    except LaunchError as exc:
        message = exc.user_message
        if message is None:
            return EXIT_OK
        print(message, file=sys.stderr)
        if isinstance(exc, ExecutableNotFoundError):
            print(f"See {STREAMLINK_DOCS}", file=sys.stderr)
        return EXIT_FAILURE
    print(f"Opening {channel_url(args.channel)}")
    return EXIT_OK


async def _cmd_open(settings: Settings, config: AppConfig, args: argparse.Namespace) -> int:
    url = channel_url(args.channel)
    if not webbrowser.open(url):
        print(f"Could not open a browser for {url}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


async def _cmd_init_config(settings: Settings, config: AppConfig, args: argparse.Namespace) -> int:
    # AppConfig.load() in main() has already written the example if needed.
    print(settings.config_path)
    return EXIT_OK


_COMMANDS = {
    "status": _cmd_status,
    "watch": _cmd_watch,
    "launch": _cmd_launch,
    "open": _cmd_open,
    "init-config": _cmd_init_config,
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twitch-launcher",
        description="Check which Twitch channels are live and open them with streamlink.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json.")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR.")

    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Refresh once and print channel status.")
    status.add_argument("--search", default="", help="Filter by display name or game.")
    status.add_argument("--online-only", action="store_true", help="Hide offline channels.")

    watch = sub.add_parser("watch", help="Refresh every refresh_interval seconds until Ctrl-C.")
    watch.add_argument("--online-only", action="store_true", help="Hide offline channels.")

    launch = sub.add_parser("launch", help="Open a channel in streamlink's player.")
    launch.add_argument("channel", help="Channel login name.")

    open_ = sub.add_parser("open", help="Open a channel page in the web browser.")
    open_.add_argument("channel", help="Channel login name.")

    sub.add_parser("init-config", help="Write an example config if none exists.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the ``twitch-launcher`` console script."""
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    overrides = {}
    if args.config is not None:
        overrides["config_path"] = args.config
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level)
    config = AppConfig.load(settings.config_path)

    try:
        return asyncio.run(_COMMANDS[args.command](settings, config, args))
    except KeyboardInterrupt:
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
