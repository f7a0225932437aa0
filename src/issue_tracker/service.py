"""Local issue use cases: add, close, list and export.

Each method performs one load/modify/save cycle against the store.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from issue_tracker.errors import EmptyTitle, InvalidIssueID, IssueNotFound
from issue_tracker.export import check_format, export_issues
from issue_tracker.labels import DEFAULT_LABEL_RULES, LabelRule, auto_label
from issue_tracker.query import filter_issues
from issue_tracker.store import STATUS_CLOSED, STATUS_OPEN, Issue, IssueStore, next_issue_id

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


_ISSUE_ID_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_issue_id(value: str | int) -> int:
    """Parse a decimal ID; whitespace, underscores and non-ASCII digits are rejected."""

    if isinstance(value, int):
        return value
    if not _ISSUE_ID_RE.fullmatch(value):
        raise InvalidIssueID(value)
    return int(value)


@dataclass(frozen=True, slots=True)
class CloseResult:
    issue: Issue
    already_closed: bool


class IssueService:
    """High-level, testable issue operations on top of an `IssueStore`."""

    def __init__(
        self,
        *,
        store: IssueStore,
        rules: Sequence[LabelRule] = DEFAULT_LABEL_RULES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._rules = rules
        self._clock = clock

    def add(self, title: str) -> Issue:
        if not title.strip():
            raise EmptyTitle()

        issues = self._store.load()
        issue = Issue(
            id=next_issue_id(issues),
            title=title,
            status=STATUS_OPEN,
            labels=[],
            created_at=self._clock(),
        )
        auto_label(issue, self._rules)
        issues.append(issue)
        self._store.save(issues)

        logger.info(
            "Issue added",
            extra={"issue_id": issue.id, "title": issue.title, "labels": issue.labels},
        )
        return issue

    def close(self, raw_id: str | int) -> CloseResult:
        issue_id = parse_issue_id(raw_id)
        issues = self._store.load()

        for issue in issues:
            if issue.id != issue_id:
                continue
            if issue.status == STATUS_CLOSED:
                return CloseResult(issue=issue, already_closed=True)
            issue.status = STATUS_CLOSED
            self._store.save(issues)
            logger.info("Issue closed", extra={"issue_id": issue_id})
            return CloseResult(issue=issue, already_closed=False)

        raise IssueNotFound(issue_id)

    def list_issues(self, *, label: str | None = None, include_closed: bool = False) -> list[Issue]:
        return filter_issues(self._store.load(), label=label, include_closed=include_closed)

    def export(self, fmt: str) -> str:
        check_format(fmt)
        return export_issues(self._store.load(), fmt)
