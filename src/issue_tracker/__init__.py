"""Issue Tracker.

A local-first issue tracker for a git repository:
- issues stored in `.issue_tracker.json` at the repository root
- keyword-prefix auto-labeling
- Markdown/JSON export
- publishing open issues to GitHub
"""

__version__ = "0.1.0"

from issue_tracker.store import Issue, IssueStore

__all__ = ["__version__", "Issue", "IssueStore"]
