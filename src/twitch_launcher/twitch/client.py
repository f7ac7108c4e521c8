"""Helix ``streams`` client: batched status lookup with rate-limit retries.

Resolves a list of channel logins into one :class:`StreamStatus` per unique
(case-insensitive) channel.  Channels the API reports live come back with
their live metadata; everything else is synthesized as offline.

Request flow for :meth:`StreamStatusClient.fetch_statuses`:

    1. Reject empty credentials before touching the network.
    2. Drop duplicate logins (first casing wins) and split the rest into
       batches of at most 100, the Helix per-call ceiling.
    3. Fetch batches one after another.  A batch answered with HTTP 429 is
       retried up to three attempts in total, sleeping until the time given
       by the ``Ratelimit-Reset`` header (an absolute epoch timestamp) or,
       failing that, for an exponential backoff of 1s, 2s, 4s.
    4. Append offline placeholders for every requested channel that was not
       returned live.

Any failure other than a rate limit aborts the whole call, and so does a
batch that is still rate limited after its last attempt.  Results of
earlier batches are discarded in that case; there is no partial result.

The client keeps no state between calls apart from the pooled HTTP
connection, so concurrent calls are safe.  Cancelling the awaiting task
interrupts an in-flight retry sleep.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable, Iterator, Sequence
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from twitch_launcher.core.exceptions import (
    DecodingError,
    InvalidCredentialsError,
    InvalidResponseError,
    NetworkError,
    RateLimitedError,
)
from twitch_launcher.models import Credentials, StreamStatus, canonical_channel
from twitch_launcher.twitch.config import (
    BASE_RETRY_DELAY_SECONDS,
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_CHANNELS_PER_REQUEST,
    MAX_RATE_LIMIT_ATTEMPTS,
    RATELIMIT_RESET_HEADER,
    STREAMS_ENDPOINT,
    USER_AGENT,
)
from twitch_launcher.twitch.schemas import HelixStreamsResponse
from twitch_launcher.twitch.urls import helix_endpoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of *items* holding at most *size* elements."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def unique_channels(channels: Sequence[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first casing seen."""
    seen: set[str] = set()
    unique: list[str] = []
    for channel in channels:
        key = canonical_channel(channel)
        if key in seen:
            continue
        seen.add(key)
        unique.append(channel)
    return unique


def retry_after_from_reset(reset_header: str | None, now: float) -> int:
    """Seconds to wait given a ``Ratelimit-Reset`` header value.

    The header is the absolute Unix time at which the bucket refills, so the
    delay is the distance from *now*, rounded up and never below one
    second.  A missing or unparsable header is treated as already reset.
    """
    try:
        reset_at = float(reset_header) if reset_header else 0.0
    except ValueError:
        reset_at = 0.0
    if not math.isfinite(reset_at):
        reset_at = 0.0
    return max(1, math.ceil(reset_at - now))


class StreamStatusClient:
    """Fetches live status for a list of Twitch channels from Helix.

    Args:
        http_client: Optional injected :class:`httpx.AsyncClient` (used by
            tests).  When omitted the client builds and owns one with the
            configured timeout and connection retries.
        batch_size: Logins per request; clamped to the Helix maximum of 100.
        max_attempts: Attempts per batch while rate limited.
        timeout: Per-request timeout in seconds.
        connect_retries: Connection retries performed by the transport.
        clock: Wall clock returning Unix seconds, used to turn the
            ``Ratelimit-Reset`` timestamp into a delay.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        batch_size: int = MAX_CHANNELS_PER_REQUEST,
        max_attempts: int = MAX_RATE_LIMIT_ATTEMPTS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        connect_retries: int = DEFAULT_CONNECT_RETRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.batch_size = max(1, min(batch_size, MAX_CHANNELS_PER_REQUEST))
        self.max_attempts = max(1, max_attempts)
        self._clock = clock
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            transport=httpx.AsyncHTTPTransport(retries=connect_retries),
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
        )

    @classmethod
    def from_settings(cls, settings: Any) -> StreamStatusClient:
        """Build a client from a :class:`~twitch_launcher.config.settings.Settings`."""
        return cls(
            batch_size=settings.helix_batch_size,
            max_attempts=settings.max_rate_limit_attempts,
            timeout=settings.request_timeout,
            connect_retries=settings.connect_retries,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> StreamStatusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_statuses(
        self,
        channels: Sequence[str],
        credentials: Credentials,
    ) -> list[StreamStatus]:
        """Return one status per unique requested channel.

        Online entries come first, in batch order and then the order the API
        returned them; offline placeholders follow in request order.

        Args:
            channels: Channel logins in any casing.  Duplicates that differ
                only by case are collapsed.
            credentials: Client ID and bearer token.

        Returns:
            List of :class:`StreamStatus`, one per unique channel.

        Raises:
            InvalidCredentialsError: Empty credentials (no request is made)
                or HTTP 401.
            RateLimitedError: A batch was still rate limited after the last
                attempt.
            InvalidResponseError: Any other non-200 status.
            NetworkError: Transport failure or timeout.
            DecodingError: Malformed response body.
        """
        if not credentials.is_complete:
            raise InvalidCredentialsError()

        requested = unique_channels(channels)
        requested_ids = {canonical_channel(channel) for channel in requested}
        online: list[StreamStatus] = []
        online_ids: set[str] = set()

        for batch in chunked(requested, self.batch_size):
            for status in await self._fetch_batch_with_retry(batch, credentials):
                # unrequested logins and repeats are dropped
                if status.identifier not in requested_ids or status.identifier in online_ids:
                    continue
                online_ids.add(status.identifier)
                online.append(status)

        offline = [
            StreamStatus.offline(channel)
            for channel in requested
            if canonical_channel(channel) not in online_ids
        ]

        logger.info(
            "helix: fetched statuses requested=%d online=%d offline=%d",
            len(requested),
            len(online),
            len(offline),
        )
        return online + offline

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_batch_with_retry(
        self,
        batch: list[str],
        credentials: Credentials,
    ) -> list[StreamStatus]:
        """Fetch one batch, retrying only on :class:`RateLimitedError`.

        No sleep follows the final attempt; its error is raised straight away.
        """
        attempt = 0
        while True:
            try:
                return await self._fetch_batch(batch, credentials)
            except RateLimitedError as exc:
                attempt += 1
                if attempt >= self.max_attempts:
                    logger.error(
                        "helix: still rate limited after %d attempts; giving up",
                        self.max_attempts,
                    )
                    raise
                delay = (
                    float(exc.retry_after)
                    if exc.retry_after > 0
                    else BASE_RETRY_DELAY_SECONDS * (2 ** (attempt - 1))
                )
                logger.warning(
                    "helix: rate limited (attempt %d/%d); retrying in %.0fs",
                    attempt,
                    self.max_attempts,
                    delay,
                )
                await self._backoff_wait(delay)

    async def _fetch_batch(
        self,
        batch: list[str],
        credentials: Credentials,
    ) -> list[StreamStatus]:
        """Issue one ``GET /streams`` for up to 100 logins and map the result."""
        params = [("user_login", channel) for channel in batch]
        headers = {
            "Client-Id": credentials.client_id,
            "Authorization": f"Bearer {credentials.access_token}",
        }

        try:
            response = await self._http.get(
                helix_endpoint(STREAMS_ENDPOINT),
                params=params,
                headers=headers,
            )
        except httpx.RequestError as exc:
            raise NetworkError(exc) from exc

        if response.status_code == 401:
            raise InvalidCredentialsError()
        if response.status_code == 429:
            retry_after = retry_after_from_reset(
                response.headers.get(RATELIMIT_RESET_HEADER), self._clock()
            )
            raise RateLimitedError(retry_after=retry_after)
        if response.status_code != 200:
            raise InvalidResponseError(response.status_code)

        try:
            body = HelixStreamsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise DecodingError(exc) from exc

        logger.debug("helix: batch of %d returned %d live", len(batch), len(body.data))
        return [stream.to_status() for stream in body.data]

    async def _backoff_wait(self, seconds: float) -> None:
        """Sleep between rate-limited attempts."""
        await asyncio.sleep(seconds)
