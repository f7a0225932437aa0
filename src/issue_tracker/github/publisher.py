"""Push open local issues to GitHub, then clear the local database.

Phases run strictly in order and cannot be resumed:

1. resolve credentials and the target repository,
2. create one GitHub issue per open local issue (failures are reported and skipped),
3. overwrite the local database with an empty array.

Step 3 runs even when some creations failed, so those issues are lost locally
without existing on GitHub. This matches the established behavior of `push`; the
returned report names every failed issue and `keep_failed=True` writes them back
instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from issue_tracker.errors import RemoteCreateFailed
from issue_tracker.github.client import CreatedIssue, GitHubClient, describe_error
from issue_tracker.github.credentials import (
    CredentialProvider,
    GitHubCredentials,
    resolve_credentials,
)
from issue_tracker.store import Issue, IssueStore

logger = logging.getLogger(__name__)

ClientFactory = Callable[[GitHubCredentials], GitHubClient]


def github_client_factory(base_url: str) -> ClientFactory:
    def _factory(credentials: GitHubCredentials) -> GitHubClient:
        return GitHubClient(
            token=credentials.token,
            repository=credentials.repository,
            base_url=base_url,
        )

    return _factory


@dataclass(slots=True)
class PushReport:
    repository: str
    source: str
    created: list[tuple[Issue, CreatedIssue]] = field(default_factory=list)
    failures: list[RemoteCreateFailed] = field(default_factory=list)
    kept: list[Issue] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.created) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class RemotePublisher:
    """Publishes the open issues of one local store to one GitHub repository."""

    def __init__(
        self,
        *,
        store: IssueStore,
        providers: Sequence[CredentialProvider],
        client_factory: ClientFactory,
    ) -> None:
        self._store = store
        self._providers = providers
        self._client_factory = client_factory

    def push(self, *, keep_failed: bool = False) -> PushReport:
        resolved = resolve_credentials(self._providers)

        client = self._client_factory(resolved.credentials)
        try:
            issues = self._store.load()
            report = PushReport(repository=client.repository, source=resolved.source)
            logger.info(
                "Publishing open issues",
                extra={"repo": client.repository, "count": sum(i.is_open for i in issues)},
            )

            for issue in issues:
                if not issue.is_open:
                    continue
                try:
                    created = client.create_issue(title=issue.title, labels=issue.labels)
                except Exception as e:
                    # Each creation stands alone; one failure never stops the batch.
                    failure = RemoteCreateFailed(issue.id, issue.title, describe_error(e))
                    logger.warning(str(failure), extra={"issue_id": issue.id}, exc_info=True)
                    report.failures.append(failure)
                    continue

                logger.info(
                    "Created GitHub issue",
                    extra={"issue_id": issue.id, "issue_number": created.number},
                )
                report.created.append((issue, created))
        finally:
            client.close()

        if keep_failed and report.failures:
            failed_ids = {f.issue_id for f in report.failures}
            report.kept = [issue for issue in issues if issue.id in failed_ids]
            self._store.save(report.kept)
        else:
            self._store.clear()

        if report.failures and not keep_failed:
            logger.warning(
                "Local database cleared although some issues were not created on GitHub",
                extra={"issue_ids": [f.issue_id for f in report.failures]},
            )
        logger.info(
            "Publish finished",
            extra={
                "attempted_count": report.attempted,
                "created_count": len(report.created),
                "failed_count": len(report.failures),
            },
        )
        return report
