"""Build and runtime version information."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import TextIO

# Filled in by the release process; empty for development builds.
INGATE_VERSION = ""
GIT_COMMIT_ID = ""


@dataclass(frozen=True)
class Version:
    """Versions of the controller, its source commit and the interpreter."""

    ingate_version: str
    git_commit_id: str
    python_version: str


def get_version() -> Version:
    """Return the version information of the running controller."""
    return Version(
        ingate_version=INGATE_VERSION,
        git_commit_id=GIT_COMMIT_ID,
        python_version=platform.python_version(),
    )


def print_version(stream: TextIO) -> None:
    """Write the version information to ``stream``, one field per line."""
    ver = get_version()
    stream.write(f"INGATE_VERSION: {ver.ingate_version}\n")
    stream.write(f"GIT_COMMIT_ID: {ver.git_commit_id}\n")
    stream.write(f"PYTHON_VERSION: {ver.python_version}\n")