"""Test configuration and fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from issue_tracker.repository import store_path
from issue_tracker.store import IssueStore

_SETTINGS_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_OWNER",
    "GITHUB_REPO",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
    "ISSUE_TRACKER_GH_EXECUTABLE",
    "ISSUE_TRACKER_USE_GH_CLI",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's GitHub environment out of the tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """`configure_logging` replaces root handlers; undo that after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Provide a directory that looks like a git checkout."""
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def store(repo_root: Path) -> IssueStore:
    """Provide an issue store at the repository's database path."""
    return IssueStore(store_path(repo_root))
