"""Locate the ``streamlink`` executable on the host.

GUI launchers and desktop shortcuts often start with a trimmed ``PATH`` that
misses package-manager prefixes, so after walking ``PATH`` the usual install
locations are probed explicitly.  Only file-system reads happen here.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

STREAMLINK_EXECUTABLE: str = "streamlink"


def conventional_locations(executable: str = STREAMLINK_EXECUTABLE, home: Path | None = None) -> list[Path]:
    """Install locations probed when ``PATH`` has no match, in probe order."""
    home = home if home is not None else Path.home()
    return [
        Path("/opt/homebrew/bin") / executable,  # Homebrew, Apple Silicon
        Path("/usr/local/bin") / executable,  # Homebrew, Intel
        home / ".local" / "bin" / executable,  # pipx / pip --user
        Path("/usr/bin") / executable,
    ]


def is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_executable(
    executable: str = STREAMLINK_EXECUTABLE,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Path | None:
    """Return the first executable match, or ``None`` when nothing is found.

    Args:
        executable: File name to look for.
        environ: Environment to read ``PATH`` from; defaults to ``os.environ``.
        home: Home directory for the per-user location; defaults to
            :meth:`Path.home`.
    """
    env = os.environ if environ is None else environ
    for directory in env.get("PATH", "").split(os.pathsep):
        if not directory:
            continue
        candidate = Path(directory) / executable
        if is_executable_file(candidate):
            return candidate

    for candidate in conventional_locations(executable, home):
        if is_executable_file(candidate):
            return candidate

    return None
