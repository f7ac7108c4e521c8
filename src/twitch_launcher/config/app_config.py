"""The user's persisted configuration: credentials, channels, refresh interval.

Stored as pretty-printed JSON with snake_case keys, by default at
``~/.config/twitch-launcher/config.json``::

    {
      "access_token": "...",
      "channels": ["Asmongold", "Zizaran"],
      "client_id": "...",
      "refresh_interval": 60
    }

The first load on a machine writes an example file with placeholder
credentials so the user has something to edit.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from twitch_launcher.models import Credentials

logger = logging.getLogger(__name__)

PLACEHOLDER_CLIENT_ID: str = "YOUR_CLIENT_ID"
PLACEHOLDER_ACCESS_TOKEN: str = "YOUR_ACCESS_TOKEN"
EXAMPLE_CHANNELS: tuple[str, ...] = ("Asmongold", "Zizaran", "Mathil1")

MIN_REFRESH_INTERVAL: int = 10


class AppConfig(BaseModel):
    """Validated contents of the config file.

    Attributes:
        client_id: Twitch application Client ID.
        access_token: OAuth access token (app or user token).
        channels: Channel logins to monitor, in display order.
        refresh_interval: Seconds between automatic refreshes.
    """

    model_config = ConfigDict(extra="ignore")

    client_id: str = ""
    access_token: str = ""
    channels: list[str] = Field(default_factory=list)
    refresh_interval: int = 60

    @field_validator("channels")
    @classmethod
    def strip_channels(cls, v: list[str]) -> list[str]:
        """Trim whitespace and drop empty entries."""
        return [c.strip() for c in v if c.strip()]

    @field_validator("refresh_interval")
    @classmethod
    def clamp_refresh_interval(cls, v: int) -> int:
        """Raise intervals below the minimum to the minimum."""
        return max(v, MIN_REFRESH_INTERVAL)

    @classmethod
    def example(cls) -> AppConfig:
        return cls(
            client_id=PLACEHOLDER_CLIENT_ID,
            access_token=PLACEHOLDER_ACCESS_TOKEN,
            channels=list(EXAMPLE_CHANNELS),
        )

    @property
    def has_valid_credentials(self) -> bool:
        """True when both credentials are set and are not the placeholders."""
        return (
            bool(self.client_id)
            and bool(self.access_token)
            and self.client_id != PLACEHOLDER_CLIENT_ID
        )

    @property
    def credentials(self) -> Credentials:
        return Credentials(client_id=self.client_id, access_token=self.access_token)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> AppConfig:
        """Read the config at *path*.

        A missing file is replaced by :meth:`example`, which is written to
        disk and returned.  A file that cannot be read or does not validate
        is left untouched; the error is logged and an empty default config
        is returned.
        """
        if not path.exists():
            example = cls.example()
            try:
                example.save(path)
                logger.info("config: wrote example config to %s", path)
            except OSError as exc:
                logger.warning("config: could not write example config to %s: %s", path, exc)
            return example

        try:
            return cls.model_validate_json(path.read_bytes())
        except (OSError, ValueError) as exc:  # ValidationError is a ValueError
            logger.error("config: failed to load %s: %s", path, exc)
            return cls()

    def save(self, path: Path) -> None:
        """Write the config atomically, creating the parent directory.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self.model_dump(mode="json"), indent=2, sort_keys=True, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".config-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload + "\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
