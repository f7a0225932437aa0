"""Filtering for `list`."""

from __future__ import annotations

from collections.abc import Iterable

from issue_tracker.store import Issue


def matches(issue: Issue, *, label: str | None = None, include_closed: bool = False) -> bool:
    if not include_closed and not issue.is_open:
        return False
    if label and label not in issue.labels:
        return False
    return True


def filter_issues(
    issues: Iterable[Issue], *, label: str | None = None, include_closed: bool = False
) -> list[Issue]:
    """Return the issues to show, in store order.

    Closed issues are dropped unless `include_closed`; a non-empty `label` keeps
    only issues carrying exactly that label (case-sensitive).
    """

    return [
        issue for issue in issues if matches(issue, label=label, include_closed=include_closed)
    ]
