"""Twitch Helix integration: live status lookup for a list of channels.

Re-exports the public symbols so callers can write::

    from twitch_launcher.twitch import StreamStatusClient, channel_url
"""

from __future__ import annotations

from twitch_launcher.twitch.client import StreamStatusClient
from twitch_launcher.twitch.urls import channel_url, helix_endpoint

__all__ = [
    "StreamStatusClient",
    "channel_url",
    "helix_endpoint",
]
