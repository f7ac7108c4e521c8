"""API constants for the Helix ``streams`` client.

Used by :class:`~twitch_launcher.twitch.client.StreamStatusClient`.  The
values that operators may want to tune are mirrored as fields on
:class:`~twitch_launcher.config.settings.Settings`; these constants are the
defaults and the provider's hard limits.
"""

from __future__ import annotations

STREAMS_ENDPOINT: str = "streams"
"""Helix endpoint returning live streams, filtered by ``user_login``."""

MAX_CHANNELS_PER_REQUEST: int = 100
"""Maximum ``user_login`` parameters Helix accepts in one request."""

MAX_RATE_LIMIT_ATTEMPTS: int = 3
"""Attempts per batch while the API answers HTTP 429."""

BASE_RETRY_DELAY_SECONDS: float = 1.0
"""Backoff base used when a 429 carries no usable reset time.
Attempt *n* (0-based) waits ``BASE_RETRY_DELAY_SECONDS * 2**n``."""

RATELIMIT_RESET_HEADER: str = "Ratelimit-Reset"
"""429 header holding the absolute Unix epoch (seconds) at which the bucket
refills.  It is a timestamp, not a countdown."""

DEFAULT_TIMEOUT_SECONDS: float = 10.0
"""Per-request timeout."""

DEFAULT_CONNECT_RETRIES: int = 2
"""Connection retries performed by the HTTP transport before failing."""

USER_AGENT: str = "TwitchLauncher/1.0 (+https://streamlink.github.io)"
