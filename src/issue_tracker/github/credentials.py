"""Resolve the GitHub token and target repository for `push`.

Resolution is an ordered list of providers. Each provider returns a
`CredentialResolution`: either a complete `GitHubCredentials` bundle or an
explicit "not resolved" with the reason. The first resolved bundle wins.

Default order:
1. `GhCliProvider` - repository and token from an authenticated `gh` CLI.
2. `EnvironmentProvider` - GITHUB_TOKEN / GITHUB_OWNER / GITHUB_REPO.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from issue_tracker.config import TrackerSettings
from issue_tracker.errors import CredentialsUnavailable

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess[str]]

GH_REPO_VIEW_ARGS: tuple[str, ...] = (
    "repo",
    "view",
    "--json",
    "name,owner",
    "--jq",
    '.owner.login + "/" + .name',
)
GH_AUTH_TOKEN_ARGS: tuple[str, ...] = ("auth", "token")


@dataclass(frozen=True, slots=True)
class GitHubCredentials:
    token: str
    owner: str
    repo: str

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class CredentialResolution:
    source: str
    credentials: GitHubCredentials | None = None
    reason: str = ""

    @classmethod
    def found(cls, source: str, credentials: GitHubCredentials) -> CredentialResolution:
        return cls(source=source, credentials=credentials)

    @classmethod
    def not_resolved(cls, source: str, reason: str) -> CredentialResolution:
        return cls(source=source, reason=reason)


@dataclass(frozen=True, slots=True)
class ResolvedCredentials:
    """The winning provider and the credentials it produced."""

    source: str
    credentials: GitHubCredentials


class CredentialProvider(Protocol):
    name: str

    def resolve(self) -> CredentialResolution: ...


def parse_repository(value: str) -> tuple[str, str] | None:
    """Split "owner/repo" into its parts; None unless exactly two non-empty parts."""

    parts = value.strip().split("/")
    if len(parts) != 2 or not all(p.strip() for p in parts):
        return None
    return parts[0].strip(), parts[1].strip()


class GhCliProvider:
    """Ask the GitHub CLI for the current repository and its auth token."""

    name = "gh"

    def __init__(
        self,
        *,
        cwd: Path | None = None,
        executable: str = "gh",
        runner: Runner = subprocess.run,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._cwd = cwd
        self._executable = executable
        self._runner = runner
        self._timeout_seconds = timeout_seconds

    def _run(self, args: Sequence[str]) -> str | None:
        cmd = [self._executable, *args]
        try:
            result = self._runner(
                cmd,
                cwd=self._cwd,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("gh invocation failed", extra={"cmd": cmd, "error": str(e)})
            return None

        if result.returncode != 0:
            logger.debug(
                "gh exited with an error",
                extra={"cmd": cmd, "returncode": result.returncode, "stderr": result.stderr.strip()},
            )
            return None
        return result.stdout.strip()

    def resolve(self) -> CredentialResolution:
        repo_output = self._run(GH_REPO_VIEW_ARGS)
        parsed = parse_repository(repo_output) if repo_output else None
        if parsed is None:
            return CredentialResolution.not_resolved(
                self.name, "could not determine repository from 'gh repo view'"
            )

        token = self._run(GH_AUTH_TOKEN_ARGS)
        if not token:
            return CredentialResolution.not_resolved(
                self.name, "could not obtain a token from 'gh auth token'"
            )

        owner, repo = parsed
        return CredentialResolution.found(
            self.name, GitHubCredentials(token=token, owner=owner, repo=repo)
        )


class EnvironmentProvider:
    """Read GITHUB_TOKEN, GITHUB_OWNER and GITHUB_REPO from settings."""

    name = "environment"

    def __init__(self, settings: TrackerSettings) -> None:
        self._settings = settings

    def resolve(self) -> CredentialResolution:
        values = {
            "GITHUB_TOKEN": self._settings.github_token.strip(),
            "GITHUB_OWNER": self._settings.github_owner.strip(),
            "GITHUB_REPO": self._settings.github_repo.strip(),
        }
        missing = [key for key, value in values.items() if not value]
        if missing:
            return CredentialResolution.not_resolved(self.name, f"missing {', '.join(missing)}")

        return CredentialResolution.found(
            self.name,
            GitHubCredentials(
                token=values["GITHUB_TOKEN"],
                owner=values["GITHUB_OWNER"],
                repo=values["GITHUB_REPO"],
            ),
        )


def default_providers(settings: TrackerSettings, *, cwd: Path | None = None) -> list[CredentialProvider]:
    providers: list[CredentialProvider] = []
    if settings.use_gh_cli:
        providers.append(GhCliProvider(cwd=cwd, executable=settings.gh_executable))
    providers.append(EnvironmentProvider(settings))
    return providers


def resolve_credentials(providers: Sequence[CredentialProvider]) -> ResolvedCredentials:
    """Return the credentials of the first provider that resolves.

    Raises:
        CredentialsUnavailable: if no provider resolves.
    """

    for provider in providers:
        resolution = provider.resolve()
        credentials = resolution.credentials
        if credentials is not None:
            logger.info(
                "Resolved GitHub credentials",
                extra={"source": resolution.source, "repo": credentials.repository},
            )
            return ResolvedCredentials(source=resolution.source, credentials=credentials)
        logger.info(
            "Credential provider did not resolve",
            extra={"source": resolution.source, "reason": resolution.reason},
        )

    raise CredentialsUnavailable()
