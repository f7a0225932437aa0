"""Configuration for the issue tracker CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The GitHub values are only needed by `push`, and only when the `gh` CLI cannot
provide them, so none of them are required here.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from issue_tracker.logging import parse_level


class TrackerSettings(BaseSettings):
    """Settings for the local issue tracker.

    Environment variables:
    - GITHUB_TOKEN                 (optional, fallback credentials)
    - GITHUB_OWNER                 (optional, fallback credentials)
    - GITHUB_REPO                  (optional, fallback credentials)
    - GITHUB_BASE_URL              (optional)
    - LOG_LEVEL                    (optional)
    - ISSUE_TRACKER_GH_EXECUTABLE  (optional)
    - ISSUE_TRACKER_USE_GH_CLI     (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `TrackerSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used when the gh CLI is unavailable",
    )
    github_owner: str = Field(
        default="",
        validation_alias="GITHUB_OWNER",
        description="Owner of the target repository when the gh CLI is unavailable",
    )
    github_repo: str = Field(
        default="",
        validation_alias="GITHUB_REPO",
        description="Name of the target repository when the gh CLI is unavailable",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    gh_executable: str = Field(
        default="gh",
        validation_alias="ISSUE_TRACKER_GH_EXECUTABLE",
        description="Name or path of the GitHub CLI used for repository and token detection",
    )
    use_gh_cli: bool = Field(
        default=True,
        validation_alias="ISSUE_TRACKER_USE_GH_CLI",
        description="Try the GitHub CLI before falling back to environment variables",
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        parse_level(value)
        return value.strip().upper()

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )
