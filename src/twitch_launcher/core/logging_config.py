"""Structured logging configuration using structlog.

Call ``configure_logging()`` once at startup (the CLI does this before any
command runs).  Modules then use either the stdlib logging API or structlog:

Stdlib usage::

    import logging
    logger = logging.getLogger(__name__)
    logger.info("helix: fetched %d streams", count)

Structlog usage (richer context binding)::

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("launch.spawned", channel="zizaran", pid=1234)

A ``refresh_id`` context variable is set by
:meth:`~twitch_launcher.monitor.StreamMonitor.refresh` and merged into every
log record emitted while that refresh runs.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import TextIO

import structlog
from structlog.types import EventDict, WrappedLogger

# ---------------------------------------------------------------------------
# Context variable: set by the refresh loop, read by the log processor
# ---------------------------------------------------------------------------

refresh_id_var: ContextVar[str | None] = ContextVar("refresh_id", default=None)
"""Identifier of the refresh cycle currently running in this context."""


# ---------------------------------------------------------------------------
# Custom processors
# ---------------------------------------------------------------------------


_SECRET_SUBSTRINGS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "bearer",
    "authorization",
    "client_id",
    "client-id",
    "credential",
})
"""Lower-cased substrings that identify log event-dict keys whose values
must be redacted before the record reaches any renderer."""


def _redact_secrets(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Replace values of secret-bearing keys with a redaction marker.

    Scans top-level keys and one level of nested ``dict`` values (for
    example ``headers={...}``).  Keys match case-insensitively against
    :data:`_SECRET_SUBSTRINGS`.
    """
    redacted = "[REDACTED]"
    for key in list(event_dict.keys()):
        if any(secret in key.lower() for secret in _SECRET_SUBSTRINGS):
            event_dict[key] = redacted
            continue
        val = event_dict[key]
        if isinstance(val, dict):
            for nested_key in list(val.keys()):
                if any(secret in str(nested_key).lower() for secret in _SECRET_SUBSTRINGS):
                    val[nested_key] = redacted
    return event_dict


def _inject_refresh_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add the current refresh ID to the event dict if one is set."""
    rid = refresh_id_var.get()
    if rid is not None and "refresh_id" not in event_dict:
        event_dict["refresh_id"] = rid
    return event_dict


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

_QUIET_LIBRARIES: tuple[str, ...] = ("httpx", "httpcore")
"""Loggers held at WARNING unless DEBUG output was asked for."""


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors run on both structlog and stdlib records before rendering."""
    return [
        structlog.contextvars.merge_contextvars,
        _inject_refresh_id,
        _redact_secrets,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _select_renderer(debug: bool, stream: TextIO) -> structlog.types.Processor:
    """Console lines for DEBUG, JSON lines otherwise.

    Colours are only used when *stream* is a terminal, so redirected DEBUG
    output stays free of escape codes.
    """
    if not debug:
        return structlog.processors.JSONRenderer()
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def configure_logging(log_level: str = "INFO", stream: TextIO | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    At ``DEBUG`` the output uses structlog's ``ConsoleRenderer``; at every
    other level it is newline delimited JSON.  Logs go to stderr by default
    so they never mix with the tables the CLI prints on stdout.

    Calling this more than once replaces the previous configuration.

    Args:
        log_level: One of ``"DEBUG"``, ``"INFO"``, ``"WARNING"``,
            ``"ERROR"``, ``"CRITICAL"``.  Case-insensitive; unknown values
            fall back to ``INFO``.
        stream: Where records are written.  ``None`` means ``sys.stderr``
            as it is at call time.
    """
    name = log_level.upper()
    debug = name == "DEBUG"
    target = sys.stderr if stream is None else stream
    processors = _shared_processors()

    # stdlib records pass through the same chain as structlog events
    handler = logging.StreamHandler(target)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _select_renderer(debug, target),
            ],
        )
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(getattr(logging, name, logging.INFO))

    for library in _QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(logging.NOTSET if debug else logging.WARNING)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
