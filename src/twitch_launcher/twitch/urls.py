"""URL constants for Twitch resources.

Kept apart from the API client so the launcher can build channel URLs
without importing anything HTTP related.
"""

from __future__ import annotations

TWITCH_BASE: str = "https://www.twitch.tv"
"""Base URL for Twitch channel pages."""

HELIX_API_BASE: str = "https://api.twitch.tv/helix"
"""Base URL for the Twitch Helix REST API."""

TWITCH_DEVELOPER_PORTAL: str = "https://dev.twitch.tv"
"""Where users register an application to obtain a Client ID."""

STREAMLINK_DOCS: str = "https://streamlink.github.io"
"""Streamlink installation and player configuration docs."""


def channel_url(channel: str) -> str:
    """Return the public page URL for *channel*, keeping its casing."""
    return f"{TWITCH_BASE}/{channel}"


def helix_endpoint(endpoint: str) -> str:
    """Return the full Helix URL for an endpoint path such as ``"streams"``."""
    return f"{HELIX_API_BASE}/{endpoint.lstrip('/')}"
