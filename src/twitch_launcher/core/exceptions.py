"""Application-wide exception hierarchy for Twitch Launcher.

Every failure the launcher can report is one of a closed set of kinds.  Each
kind is an exception class carrying its own payload (a retry delay, an HTTP
status code, the underlying OS error) and an :class:`ErrorKind` tag, so
callers can either ``except`` a specific class or branch on ``exc.kind``.

Hierarchy::

    TwitchLauncherError
    ├── StreamStatusError
    │   ├── InvalidCredentialsError
    │   ├── RateLimitedError          (retry_after: int)
    │   ├── NetworkError              (cause)
    │   ├── DecodingError             (cause)
    │   └── InvalidResponseError      (status_code: int)
    └── LaunchError
        ├── LaunchRateLimitedError    (remaining: float), silent
        ├── ExecutableNotFoundError   (executable: str)
        └── LaunchFailedError         (cause)
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which failure kind an exception represents."""

    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    DECODING_ERROR = "decoding_error"
    INVALID_RESPONSE = "invalid_response"
    LAUNCH_RATE_LIMITED = "launch_rate_limited"
    EXECUTABLE_NOT_FOUND = "executable_not_found"
    LAUNCH_FAILED = "launch_failed"


class TwitchLauncherError(Exception):
    """Base class for all Twitch Launcher exceptions.

    Subclasses set the class attribute ``kind`` and may override
    :attr:`user_message` with the text shown to the user.
    """

    kind: ErrorKind

    @property
    def user_message(self) -> str | None:
        """Message suitable for display, or ``None`` when nothing should be shown."""
        return str(self)


# ---------------------------------------------------------------------------
# Stream status (Helix API) errors
# ---------------------------------------------------------------------------


class StreamStatusError(TwitchLauncherError):
    """Base class for failures raised by the stream status client."""


class InvalidCredentialsError(StreamStatusError):
    """Raised when the client id or token is missing or rejected (HTTP 401).

    Terminal for the call and never retried; the user has to fix the
    credentials in the config file.
    """

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid API credentials. Check config.json.") -> None:
        super().__init__(message)


class RateLimitedError(StreamStatusError):
    """Raised when the Helix API answers HTTP 429.

    Args:
        retry_after: Whole seconds to wait before retrying (at least 1 when
            derived from a ``Ratelimit-Reset`` header).
    """

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, retry_after: int) -> None:
        super().__init__(f"Rate limited. Retry in {retry_after}s.")
        self.retry_after = retry_after


class NetworkError(StreamStatusError):
    """Raised on transport failures: DNS, connect errors, timeouts, resets.

    Args:
        cause: The underlying transport exception.
    """

    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class DecodingError(StreamStatusError):
    """Raised when a 200 response body does not have the expected shape.

    Args:
        cause: The JSON or validation exception raised while decoding.
    """

    kind = ErrorKind.DECODING_ERROR

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Decoding error: {cause}")
        self.cause = cause


class InvalidResponseError(StreamStatusError):
    """Raised for any unexpected HTTP status code.

    Args:
        status_code: The HTTP status code returned by the API.
    """

    kind = ErrorKind.INVALID_RESPONSE

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Launcher errors
# ---------------------------------------------------------------------------


class LaunchError(TwitchLauncherError):
    """Base class for failures raised by the process launcher."""


class LaunchRateLimitedError(LaunchError):
    """Raised when a channel is launched again inside its cooldown window.

    This is the normal outcome of a double click and is not meant to be
    shown to the user, hence :attr:`user_message` is ``None``.

    Args:
        channel: Canonical channel identifier.
        remaining: Seconds left until the cooldown expires.
    """

    kind = ErrorKind.LAUNCH_RATE_LIMITED

    def __init__(self, channel: str, remaining: float) -> None:
        super().__init__(f"Launch of '{channel}' suppressed; cooldown {remaining:.1f}s left")
        self.channel = channel
        self.remaining = remaining

    @property
    def user_message(self) -> str | None:
        return None


class ExecutableNotFoundError(LaunchError):
    """Raised when the ``streamlink`` executable cannot be located.

    Args:
        executable: Name of the executable that was searched for.
    """

    kind = ErrorKind.EXECUTABLE_NOT_FOUND

    def __init__(self, executable: str = "streamlink") -> None:
        super().__init__(
            f"{executable.capitalize()} not found. Install via: "
            f"pipx install {executable} (or brew install {executable})"
        )
        self.executable = executable


class LaunchFailedError(LaunchError):
    """Raised when the operating system refuses to start the player process.

    Args:
        cause: The ``OSError`` or ``ValueError`` raised by process creation.
    """

    kind = ErrorKind.LAUNCH_FAILED

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Launch failed: {cause}")
        self.cause = cause
