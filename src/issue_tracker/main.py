"""CLI entrypoint for the local issue tracker.

Commands map one-to-one onto `IssueService` / `RemotePublisher` calls. Core errors
are `IssueTrackerError`s; this module turns them into messages and exit codes.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from issue_tracker import __version__
from issue_tracker.config import TrackerSettings
from issue_tracker.errors import IssueTrackerError
from issue_tracker.export import EXPORT_FORMATS
from issue_tracker.github.credentials import default_providers
from issue_tracker.github.publisher import PushReport, RemotePublisher, github_client_factory
from issue_tracker.logging import configure_logging
from issue_tracker.repository import find_repository_root, store_path
from issue_tracker.service import IssueService
from issue_tracker.store import Issue, IssueStore

logger = logging.getLogger(__name__)

COMMANDS: tuple[str, ...] = ("add", "list", "close", "publish", "push", "help")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_PARTIAL = 4

_RULE = "-" * 50

_EPILOG = """\
Titles prefixed with 'BUG:', 'FEAT:', 'DOCS:', 'REFACTOR:', 'TEST:' or 'CHORE:'
are labeled automatically.

'push' uses the official 'gh' CLI for authentication and repository detection
when it is installed and logged in. As a fallback it reads GITHUB_TOKEN,
GITHUB_OWNER and GITHUB_REPO from the environment (or .env).

Example:
  issue-tracker publish markdown > ISSUES.md
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="issue-tracker",
        description="A simple CLI tool for managing development issues in a git repository.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"issue-tracker {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    add = subparsers.add_parser("add", help="Add a new issue")
    add.add_argument("title", nargs="+", help="Issue title (words are joined with spaces)")

    list_ = subparsers.add_parser("list", help="List open issues")
    list_.add_argument("--label", default="", help="Only show issues with this exact label")
    list_.add_argument(
        "--all", dest="include_closed", action="store_true", help="Show closed issues as well"
    )

    close = subparsers.add_parser("close", help="Close an issue by its ID")
    close.add_argument("id", help="Issue ID")

    publish = subparsers.add_parser(
        "publish", help=f"Print all issues in a format ({', '.join(EXPORT_FORMATS)})"
    )
    publish.add_argument("format", help=f"One of: {', '.join(EXPORT_FORMATS)}")

    push = subparsers.add_parser(
        "push", help="Create GitHub issues for all open issues, then clear the local database"
    )
    push.add_argument(
        "--keep-failed",
        action="store_true",
        help="Keep issues that could not be created on GitHub instead of clearing them",
    )

    subparsers.add_parser("help", help="Show this help message")

    return parser


def _format_issue_line(issue: Issue) -> str:
    marker = "⚪️" if issue.is_open else "✅"
    return f"{marker} ID: {issue.id:<3d} | {issue.title:<50} | Labels: {', '.join(issue.labels)}"


def _print_listing(issues: Sequence[Issue]) -> None:
    print(_RULE)
    print("                 Issue Tracker")
    print(_RULE)
    for issue in issues:
        print(_format_issue_line(issue))
    if not issues:
        print("No issues found.")
    print(_RULE)


def _print_push_report(report: PushReport) -> None:
    for issue, created in report.created:
        print(f'Successfully created GitHub issue #{created.number} for: "{issue.title}"')
    print(f"Finished. Published {len(report.created)} issues to {report.repository}.")

    if report.kept:
        print(
            f"Kept {len(report.kept)} issue(s) that could not be published in the local database.",
            file=sys.stderr,
        )
    elif report.failures:
        print(
            "WARNING: the following issues were NOT created on GitHub and have been "
            "removed from the local database:",
            file=sys.stderr,
        )
        for failure in report.failures:
            print(f"  #{failure.issue_id} {failure.title} ({failure.reason})", file=sys.stderr)

    if not report.kept:
        print("Successfully cleared all local issues.")


def _run(args: argparse.Namespace, settings: TrackerSettings) -> int:
    root = find_repository_root(Path.cwd())
    store = IssueStore(store_path(root))
    service = IssueService(store=store)

    if args.command == "add":
        issue = service.add(" ".join(args.title))
        print(f"Successfully added issue #{issue.id}: {issue.title}")
        print(f"Labels: {', '.join(issue.labels)}")
        return EXIT_OK

    if args.command == "list":
        _print_listing(service.list_issues(label=args.label, include_closed=args.include_closed))
        return EXIT_OK

    if args.command == "close":
        result = service.close(args.id)
        if result.already_closed:
            print(f"Issue #{result.issue.id} is already closed.")
        else:
            print(f"Successfully closed issue #{result.issue.id}.")
        return EXIT_OK

    if args.command == "publish":
        text = service.export(args.format)
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        return EXIT_OK

    if args.command == "push":
        publisher = RemotePublisher(
            store=store,
            providers=default_providers(settings, cwd=root),
            client_factory=github_client_factory(settings.github_base_url),
        )
        report = publisher.push(keep_failed=args.keep_failed)
        _print_push_report(report)
        return EXIT_OK if report.ok else EXIT_PARTIAL

    logger.error("Unknown command", extra={"command": args.command})
    return EXIT_USAGE


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not argv:
        parser.print_help()
        return EXIT_OK

    if not argv[0].startswith("-") and argv[0] not in COMMANDS:
        print(f"Unknown command: {argv[0]}", file=sys.stderr)
        parser.print_help()
        return EXIT_USAGE

    args = parser.parse_args(argv)
    if args.command in (None, "help"):
        parser.print_help()
        return EXIT_OK

    try:
        settings = TrackerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment and .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_USAGE

    configure_logging(settings.log_level)

    try:
        return _run(args, settings)

    except IssueTrackerError as e:
        logger.debug("Command failed", extra={"command": args.command, "error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    except Exception:
        logger.exception("Command failed")
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
