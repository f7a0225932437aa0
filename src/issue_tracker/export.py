"""Render the whole issue database as Markdown or JSON."""

from __future__ import annotations

from collections.abc import Sequence

from issue_tracker.errors import UnsupportedFormat
from issue_tracker.store import Issue, issues_to_json

FORMAT_MARKDOWN = "markdown"
FORMAT_JSON = "json"
EXPORT_FORMATS: tuple[str, ...] = (FORMAT_MARKDOWN, FORMAT_JSON)

MARKDOWN_HEADING = "# Project Issues"


def render_markdown(issues: Sequence[Issue]) -> str:
    parts = [f"{MARKDOWN_HEADING}\n\n"]
    for issue in issues:
        parts.append(
            "\n"
            f"- **[{issue.status}]** {issue.title} `[ID: {issue.id}]`\n"
            f"  - **Labels**: {', '.join(issue.labels)}\n"
            f"  - **Created**: {issue.created_at.strftime('%Y-%m-%d')}\n"
        )
    return "".join(parts)


def render_json(issues: Sequence[Issue]) -> str:
    return issues_to_json(issues)


def check_format(fmt: str) -> None:
    if fmt not in EXPORT_FORMATS:
        raise UnsupportedFormat(fmt, EXPORT_FORMATS)


def export_issues(issues: Sequence[Issue], fmt: str) -> str:
    """Render all issues (open and closed) in store order.

    Raises:
        UnsupportedFormat: if `fmt` is not one of `EXPORT_FORMATS`.
    """

    check_format(fmt)
    if fmt == FORMAT_MARKDOWN:
        return render_markdown(issues)
    return render_json(issues)
