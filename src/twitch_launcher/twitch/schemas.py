"""Pydantic models for the Helix ``GET /streams`` response body.

Only the fields the launcher uses are declared; Helix sends more
(``id``, ``user_id``, ``tags``, ``started_at`` ...) and those are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from twitch_launcher.models import StreamStatus


class HelixStream(BaseModel):
    """One live stream record from ``data[]``.

    Attributes:
        user_login: Broadcaster login name (lowercase on Helix).
        user_name: Broadcaster display name.
        viewer_count: Current concurrent viewers.
        game_name: Category name; empty string when none is set.
        title: Stream title.
        thumbnail_url: Template with literal ``{width}x{height}`` placeholders.
    """

    model_config = ConfigDict(extra="ignore")

    user_login: str
    user_name: str
    viewer_count: int = Field(ge=0)
    game_name: str = ""
    title: str = ""
    thumbnail_url: str

    def to_status(self) -> StreamStatus:
        """Map this record to an online :class:`StreamStatus`."""
        return StreamStatus(
            name=self.user_login,
            display_name=self.user_name,
            is_online=True,
            viewer_count=self.viewer_count,
            game_name=self.game_name,
            title=self.title,
            thumbnail_template=self.thumbnail_url,
        )


class HelixStreamsResponse(BaseModel):
    """Top-level ``GET /streams`` body.  ``pagination`` is not needed because
    a ``user_login`` filtered query returns at most one record per login."""

    model_config = ConfigDict(extra="ignore")

    data: list[HelixStream]
