"""Unit tests for tiered GitHub credential resolution."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from issue_tracker.config import TrackerSettings
from issue_tracker.errors import CredentialsUnavailable
from issue_tracker.github.credentials import (
    GH_AUTH_TOKEN_ARGS,
    GH_REPO_VIEW_ARGS,
    CredentialResolution,
    EnvironmentProvider,
    GhCliProvider,
    GitHubCredentials,
    default_providers,
    parse_repository,
    resolve_credentials,
)


class FakeRunner:
    """Stands in for subprocess.run, keyed by the gh arguments."""

    def __init__(self, responses: dict[tuple[str, ...], tuple[int, str]]) -> None:
        self._responses = responses
        self.calls: list[tuple[list[str], dict[str, Any]]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append((cmd, kwargs))
        returncode, stdout = self._responses.get(tuple(cmd[1:]), (1, ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="error")


class StaticProvider:
    def __init__(self, name: str, credentials: GitHubCredentials | None) -> None:
        self.name = name
        self._credentials = credentials
        self.calls = 0

    def resolve(self) -> CredentialResolution:
        self.calls += 1
        if self._credentials is None:
            return CredentialResolution.not_resolved(self.name, "nothing here")
        return CredentialResolution.found(self.name, self._credentials)


def _settings(**values: str) -> TrackerSettings:
    return TrackerSettings(_env_file=None, **values)


def test_gh_provider_resolves_repository_and_token(tmp_path: Path) -> None:
    runner = FakeRunner(
        {
            GH_REPO_VIEW_ARGS: (0, "octo-org/octo-repo\n"),
            GH_AUTH_TOKEN_ARGS: (0, "gho_secret\n"),
        }
    )

    resolution = GhCliProvider(cwd=tmp_path, runner=runner).resolve()

    assert resolution.source == "gh"
    assert resolution.credentials == GitHubCredentials(
        token="gho_secret", owner="octo-org", repo="octo-repo"
    )
    assert resolution.credentials.repository == "octo-org/octo-repo"
    assert [cmd for cmd, _ in runner.calls] == [
        ["gh", *GH_REPO_VIEW_ARGS],
        ["gh", *GH_AUTH_TOKEN_ARGS],
    ]
    assert all(kwargs["cwd"] == tmp_path for _, kwargs in runner.calls)


@pytest.mark.parametrize(
    "responses",
    [
        {GH_REPO_VIEW_ARGS: (1, ""), GH_AUTH_TOKEN_ARGS: (0, "tok")},
        {GH_REPO_VIEW_ARGS: (0, "octo-org/octo-repo"), GH_AUTH_TOKEN_ARGS: (1, "")},
        {GH_REPO_VIEW_ARGS: (0, "octo-org/octo-repo"), GH_AUTH_TOKEN_ARGS: (0, "  \n")},
        {GH_REPO_VIEW_ARGS: (0, "just-a-name"), GH_AUTH_TOKEN_ARGS: (0, "tok")},
        {GH_REPO_VIEW_ARGS: (0, "a/b/c"), GH_AUTH_TOKEN_ARGS: (0, "tok")},
        {GH_REPO_VIEW_ARGS: (0, "/repo"), GH_AUTH_TOKEN_ARGS: (0, "tok")},
    ],
)
def test_gh_provider_incomplete_results_do_not_resolve(
    responses: dict[tuple[str, ...], tuple[int, str]],
) -> None:
    resolution = GhCliProvider(runner=FakeRunner(responses)).resolve()

    assert resolution.credentials is None
    assert resolution.reason


def test_gh_provider_missing_executable_does_not_resolve() -> None:
    def runner(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError(cmd[0])

    resolution = GhCliProvider(executable="no-such-gh", runner=runner).resolve()

    assert resolution.credentials is None


def test_gh_provider_timeout_does_not_resolve() -> None:
    def runner(cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    assert GhCliProvider(runner=runner, timeout_seconds=0.1).resolve().credentials is None


def test_environment_provider_requires_all_three_values() -> None:
    resolution = EnvironmentProvider(_settings(GITHUB_TOKEN="t", GITHUB_OWNER="o")).resolve()

    assert resolution.credentials is None
    assert "GITHUB_REPO" in resolution.reason
    assert "GITHUB_TOKEN" not in resolution.reason


def test_environment_provider_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    monkeypatch.setenv("GITHUB_OWNER", "env-owner")
    monkeypatch.setenv("GITHUB_REPO", "env-repo")

    resolution = EnvironmentProvider(_settings()).resolve()

    assert resolution.source == "environment"
    assert resolution.credentials == GitHubCredentials(
        token="env-token", owner="env-owner", repo="env-repo"
    )


def test_first_resolved_provider_wins() -> None:
    first = StaticProvider("first", GitHubCredentials(token="a", owner="o", repo="r"))
    second = StaticProvider("second", GitHubCredentials(token="b", owner="o", repo="r"))

    resolved = resolve_credentials([first, second])

    assert resolved.source == "first"
    assert resolved.credentials.token == "a"
    assert second.calls == 0


def test_falls_back_when_first_tier_does_not_resolve() -> None:
    first = StaticProvider("gh", None)
    second = StaticProvider("environment", GitHubCredentials(token="b", owner="o", repo="r"))

    resolved = resolve_credentials([first, second])

    assert resolved.source == "environment"
    assert resolved.credentials == GitHubCredentials(token="b", owner="o", repo="r")
    assert first.calls == 1


def test_no_provider_resolves() -> None:
    with pytest.raises(CredentialsUnavailable, match="GITHUB_TOKEN"):
        resolve_credentials([StaticProvider("gh", None), StaticProvider("environment", None)])


def test_default_providers_order() -> None:
    providers = default_providers(_settings())
    assert [p.name for p in providers] == ["gh", "environment"]

    providers = default_providers(_settings(ISSUE_TRACKER_USE_GH_CLI="false"))
    assert [p.name for p in providers] == ["environment"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("octo-org/octo-repo", ("octo-org", "octo-repo")),
        (" octo-org/octo-repo \n", ("octo-org", "octo-repo")),
        ("octo-org", None),
        ("octo-org/", None),
        ("", None),
    ],
)
def test_parse_repository(value: str, expected: tuple[str, str] | None) -> None:
    assert parse_repository(value) == expected
