"""Shared pytest fixtures for Twitch Launcher tests.

Fixture summary
---------------
isolated_settings — points every ``TWITCH_LAUNCHER_*`` setting at a tmp dir.
credentials       — a complete :class:`Credentials` pair.
helix_stream      — factory for raw Helix ``data[]`` records.
helix_body        — factory for a full ``GET /streams`` body.

No test touches the network, the user's home directory or a real
streamlink binary.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest

from twitch_launcher.config.settings import get_settings
from twitch_launcher.models import Credentials


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Keep settings and config files inside the test's tmp directory."""
    config_path = tmp_path / "twitch-launcher" / "config.json"
    monkeypatch.setenv("TWITCH_LAUNCHER_CONFIG_PATH", str(config_path))
    monkeypatch.setenv("TWITCH_LAUNCHER_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(tmp_path)  # no stray .env is picked up
    get_settings.cache_clear()
    yield config_path
    get_settings.cache_clear()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id="test-client-id", access_token="test-access-token")


@pytest.fixture
def helix_stream() -> Callable[..., dict[str, Any]]:
    """Build one raw stream record as Helix returns it."""

    def _make(login: str, viewers: int = 100, **overrides: Any) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": f"stream-{login}",
            "user_id": f"uid-{login}",
            "user_login": login.lower(),
            "user_name": login,
            "game_id": "509658",
            "game_name": "Just Chatting",
            "type": "live",
            "title": f"{login} is live",
            "viewer_count": viewers,
            "started_at": "2026-10-19T08:00:00Z",
            "language": "en",
            "thumbnail_url": (
                f"https://static-cdn.jtvnw.net/previews-ttv/live_user_{login.lower()}"
                "-{width}x{height}.jpg"
            ),
            "tags": ["English"],
            "is_mature": False,
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def helix_body(helix_stream: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
    """Build a ``GET /streams`` body for the given live logins."""

    def _make(*logins: str) -> dict[str, Any]:
        return {"data": [helix_stream(login) for login in logins], "pagination": {}}

    return _make
