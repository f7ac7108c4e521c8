"""Unit tests for the persisted user config.

Covers:
- load() of a missing file writes and returns the example config
- load() of a valid file
- load() of invalid JSON / invalid values returns an empty default and
  leaves the file untouched, including undecodable bytes
- save() creates parent directories and writes sorted, indented JSON
- has_valid_credentials with placeholder, empty and real values
- channel whitespace trimming and refresh_interval clamping
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from twitch_launcher.config.app_config import (
    EXAMPLE_CHANNELS,
    PLACEHOLDER_CLIENT_ID,
    AppConfig,
)


class TestLoad:
    def test_missing_file_writes_example(self, tmp_path: Path) -> None:
        """First run: the example config is written to disk and returned."""
        path = tmp_path / "nested" / "config.json"

        config = AppConfig.load(path)

        assert path.exists()
        assert config.client_id == PLACEHOLDER_CLIENT_ID
        assert config.channels == list(EXAMPLE_CHANNELS)
        assert config.refresh_interval == 60
        assert AppConfig.load(path) == config

    def test_valid_file_is_read(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "client_id": "abc",
                    "access_token": "def",
                    "channels": ["Zizaran"],
                    "refresh_interval": 120,
                    "unknown_key": True,
                }
            ),
            encoding="utf-8",
        )

        config = AppConfig.load(path)

        assert config.client_id == "abc"
        assert config.access_token == "def"
        assert config.channels == ["Zizaran"]
        assert config.refresh_interval == 120

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"channels": "zizaran"}',
            '{"refresh_interval": "soon"}',
        ],
    )
    def test_invalid_file_returns_default_and_keeps_file(self, tmp_path: Path, content: str) -> None:
        """A broken file is not overwritten; an empty config is used instead."""
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")

        config = AppConfig.load(path)

        assert config == AppConfig()
        assert not config.has_valid_credentials
        assert path.read_text(encoding="utf-8") == content

    def test_invalid_utf8_returns_default(self, tmp_path: Path) -> None:
        """Undecodable bytes are reported like any other broken file."""
        path = tmp_path / "config.json"
        raw = b'{"client_id": "\xff\xfe"}'
        path.write_bytes(raw)

        config = AppConfig.load(path)

        assert config == AppConfig()
        assert path.read_bytes() == raw

    def test_short_refresh_interval_keeps_credentials(self, tmp_path: Path) -> None:
        """An out-of-range interval is clamped; the rest of the file survives."""
        path = tmp_path / "config.json"
        path.write_text(
            '{"client_id": "abc", "access_token": "tok", "channels": ["a"], "refresh_interval": 5}',
            encoding="utf-8",
        )

        config = AppConfig.load(path)

        assert config.client_id == "abc"
        assert config.access_token == "tok"
        assert config.channels == ["a"]
        assert config.refresh_interval == 10
        assert config.has_valid_credentials


class TestSave:
    def test_writes_sorted_indented_json(self, tmp_path: Path) -> None:
        """Keys are snake_case, sorted, and indented by two spaces."""
        path = tmp_path / "a" / "b" / "config.json"
        AppConfig(client_id="id", access_token="tok", channels=["Zizaran"]).save(path)

        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        assert list(data) == ["access_token", "channels", "client_id", "refresh_interval"]
        assert '\n  "access_token": "tok"' in text

    def test_overwrites_existing_file_without_leftovers(self, tmp_path: Path) -> None:
        """Replacing the file leaves no temporary files in the directory."""
        path = tmp_path / "config.json"
        AppConfig(channels=["one"]).save(path)
        AppConfig(channels=["two"]).save(path)

        assert AppConfig.load(path).channels == ["two"]
        assert [p.name for p in tmp_path.iterdir()] == ["config.json"]


class TestValidation:
    @pytest.mark.parametrize(
        ("client_id", "token", "expected"),
        [
            ("real-id", "real-token", True),
            (PLACEHOLDER_CLIENT_ID, "real-token", False),
            ("", "real-token", False),
            ("real-id", "", False),
        ],
    )
    def test_has_valid_credentials(self, client_id: str, token: str, expected: bool) -> None:
        config = AppConfig(client_id=client_id, access_token=token)
        assert config.has_valid_credentials is expected

    def test_example_has_no_valid_credentials(self) -> None:
        assert not AppConfig.example().has_valid_credentials

    def test_channels_are_trimmed(self) -> None:
        """Whitespace is stripped and blank entries dropped."""
        config = AppConfig(channels=["  Zizaran ", "", "   ", "Mathil1"])
        assert config.channels == ["Zizaran", "Mathil1"]

    def test_refresh_interval_below_minimum_is_clamped(self) -> None:
        """Short intervals are raised to 10 seconds rather than rejected."""
        assert AppConfig(refresh_interval=9).refresh_interval == 10
        assert AppConfig(refresh_interval=-5).refresh_interval == 10
        assert AppConfig(refresh_interval=10).refresh_interval == 10

    def test_credentials_property(self) -> None:
        creds = AppConfig(client_id="id", access_token="tok").credentials
        assert (creds.client_id, creds.access_token) == ("id", "tok")
