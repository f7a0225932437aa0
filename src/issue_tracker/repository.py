"""Locate the repository that anchors the local issue database."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from issue_tracker.errors import NotARepository

logger = logging.getLogger(__name__)

DB_FILE_NAME = ".issue_tracker.json"
REPOSITORY_MARKERS: tuple[str, ...] = (".git",)


def find_repository_root(start: Path, markers: Sequence[str] = REPOSITORY_MARKERS) -> Path:
    """Return the closest directory at or above `start` that contains a marker.

    A marker may be a directory or a file (git worktrees and submodules use a
    `.git` file).

    Raises:
        NotARepository: if the filesystem root is reached without a match.
    """

    path = start.absolute()
    while True:
        if any((path / marker).exists() for marker in markers):
            logger.debug("Found repository root", extra={"root": str(path)})
            return path

        parent = path.parent
        if parent == path:
            raise NotARepository(start)
        path = parent


def store_path(root: Path) -> Path:
    """Path of the issue database for a repository root."""

    return root / DB_FILE_NAME
