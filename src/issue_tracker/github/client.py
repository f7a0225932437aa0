"""GitHub API client wrapper.

This wraps PyGithub to keep GitHub calls out of CLI code and make tests easy.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from issue_tracker.errors import RemoteUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CreatedIssue:
    """Minimal issue metadata returned from GitHub."""

    repository: str
    number: int
    title: str
    url: str | None
    created_at: datetime | None


def describe_error(error: Exception) -> str:
    if isinstance(error, GithubException):
        message = error.data.get("message") if isinstance(error.data, dict) else None
        return f"{error.status} {message or error.data}"
    return str(error) or type(error).__name__


class GitHubClient:
    """Small wrapper around PyGithub for the operations `push` needs."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=base_url.rstrip("/"))

        try:
            self._repo = self._github.get_repo(repository)
        except (GithubException, requests.RequestException) as e:
            self._github.close()
            raise RemoteUnavailable(repository, describe_error(e)) from e

        logger.info(
            "Authenticated with GitHub and connected to repository", extra={"repo": repository}
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def create_issue(self, *, title: str, labels: Sequence[str] | None = None) -> CreatedIssue:
        """Create an issue. PyGithub and transport errors propagate to the caller."""

        if not title.strip():
            raise ValueError("Issue title is required")

        issue = self._repo.create_issue(title=title, labels=list(labels or []))

        return CreatedIssue(
            repository=self._repository_name,
            number=issue.number,
            title=issue.title,
            url=getattr(issue, "html_url", None),
            created_at=getattr(issue, "created_at", None),
        )

    def close(self) -> None:
        if self._github is not None:
            self._github.close()
