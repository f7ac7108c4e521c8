"""Domain types shared by the status client, the launcher and the monitor.

A channel is identified by its login name, compared case-insensitively.
:func:`canonical_channel` gives the lowercase form used for equality and as
a dictionary key; the originally requested casing is kept for display and
for building channel URLs.
"""

from __future__ import annotations

from dataclasses import dataclass


def canonical_channel(name: str) -> str:
    """Return the canonical (lowercase) identifier for a channel login."""
    return name.lower()


@dataclass(frozen=True)
class Credentials:
    """Twitch application credentials used for Helix requests.

    Attributes:
        client_id: Twitch application Client ID (``Client-Id`` header).
        access_token: OAuth bearer token (``Authorization`` header).
    """

    client_id: str
    access_token: str

    def __repr__(self) -> str:
        return f"Credentials(client_id={self.client_id!r}, access_token='***')"

    @property
    def is_complete(self) -> bool:
        return bool(self.client_id) and bool(self.access_token)


@dataclass(frozen=True)
class StreamStatus:
    """Current state of one channel.

    Offline entries are synthesized for channels the API did not return, with
    the requested casing as ``name`` and ``display_name`` and every live field
    empty.

    Attributes:
        name: Login name (provider casing when online, requested casing when
            offline).
        display_name: Human-readable channel name.
        is_online: Whether the channel is live.
        viewer_count: Current viewers; ``0`` when offline.
        game_name: Category being streamed; empty when offline or unset.
        title: Stream title; empty when offline.
        thumbnail_template: Preview URL containing literal ``{width}`` and
            ``{height}`` placeholders; ``None`` when offline.
    """

    name: str
    display_name: str
    is_online: bool = False
    viewer_count: int = 0
    game_name: str = ""
    title: str = ""
    thumbnail_template: str | None = None

    @classmethod
    def offline(cls, name: str) -> StreamStatus:
        """Build the placeholder entry for a channel that is not live."""
        return cls(name=name, display_name=name)

    @property
    def identifier(self) -> str:
        """Canonical identifier, used as the join key."""
        return canonical_channel(self.name)

    def thumbnail_url(self, width: int = 440, height: int = 248) -> str | None:
        """Substitute the size placeholders of the thumbnail template."""
        if self.thumbnail_template is None:
            return None
        return self.thumbnail_template.replace("{width}", str(width)).replace(
            "{height}", str(height)
        )

    @property
    def formatted_viewers(self) -> str:
        """Viewer count abbreviated as ``950``, ``1.2K`` or ``3.4M``."""
        if self.viewer_count >= 1_000_000:
            return f"{self.viewer_count / 1_000_000:.1f}M"
        if self.viewer_count >= 1_000:
            return f"{self.viewer_count / 1_000:.1f}K"
        return str(self.viewer_count)

    @property
    def initial(self) -> str:
        """First letter of the display name, upper-cased, for avatars."""
        return self.display_name[:1].upper()

    @property
    def accessibility_description(self) -> str:
        """Screen-reader friendly one-line summary."""
        if not self.is_online:
            return f"{self.display_name}, offline"
        viewer_text = "1 viewer" if self.viewer_count == 1 else f"{self.formatted_viewers} viewers"
        game_text = f"playing {self.game_name}" if self.game_name else "streaming"
        return f"{self.display_name}, live, {game_text}, {viewer_text}"
