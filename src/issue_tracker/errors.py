"""Error types raised by the issue tracker core.

Every failure the CLI reports is an `IssueTrackerError`. The core never exits the
process; `issue_tracker.main` decides the exit status.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class IssueTrackerError(Exception):
    """Base class for all issue tracker errors."""


@dataclass(frozen=True, slots=True)
class NotARepository(IssueTrackerError):
    """Raised when no repository marker is found above the starting directory."""

    start: Path

    def __str__(self) -> str:
        return f"Not a git repository (or any of the parent directories): {self.start}"


@dataclass(frozen=True, slots=True)
class StoreUnreadable(IssueTrackerError):
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Could not read issue database {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class StoreCorrupt(IssueTrackerError):
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Could not parse issue database {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class StoreUnwritable(IssueTrackerError):
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"Could not write issue database {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class InvalidIssueID(IssueTrackerError):
    """Raised when an issue ID argument is not a number."""

    value: str

    def __str__(self) -> str:
        return f"Invalid ID format {self.value!r}. Please provide a number."


@dataclass(frozen=True, slots=True)
class IssueNotFound(IssueTrackerError):
    issue_id: int

    def __str__(self) -> str:
        return f"Issue with ID #{self.issue_id} not found."


class EmptyTitle(IssueTrackerError):
    def __str__(self) -> str:
        return "Issue title cannot be empty."


@dataclass(frozen=True, slots=True)
class UnsupportedFormat(IssueTrackerError):
    format: str
    supported: tuple[str, ...]

    def __str__(self) -> str:
        return (
            f"Unknown format {self.format!r}. "
            f"Supported formats: {', '.join(self.supported)}."
        )


class CredentialsUnavailable(IssueTrackerError):
    """Raised when neither the gh CLI nor the environment yields GitHub credentials."""

    def __str__(self) -> str:
        return (
            "Please install and authenticate the 'gh' CLI ('gh auth login'), "
            "or set GITHUB_TOKEN, GITHUB_OWNER, and GITHUB_REPO environment variables."
        )


@dataclass(frozen=True, slots=True)
class RemoteUnavailable(IssueTrackerError):
    """Raised when the target repository cannot be reached before publishing."""

    repository: str
    reason: str

    def __str__(self) -> str:
        return f"Could not connect to GitHub repository {self.repository}: {self.reason}"


@dataclass(frozen=True, slots=True)
class RemoteCreateFailed(IssueTrackerError):
    """Raised per issue when GitHub rejects an issue creation. Never aborts a batch."""

    issue_id: int
    title: str
    reason: str

    def __str__(self) -> str:
        return f"Error creating GitHub issue for local ID #{self.issue_id}: {self.reason}"
