"""Keyword-prefix auto-labeling.

A title such as `BUG: crash on save` or `feat: dark mode` gets a label derived from
its prefix. The prefix is matched case-insensitively at the start of the title and
must be followed by a colon. The title itself is never rewritten.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from issue_tracker.store import Issue

LABEL_BUG = "bug"
LABEL_FEATURE = "feature"
LABEL_DOCUMENTATION = "documentation"
LABEL_REFACTOR = "refactor"
LABEL_TESTING = "testing"
LABEL_CHORE = "chore"


@dataclass(frozen=True, slots=True)
class LabelRule:
    pattern: re.Pattern[str]
    label: str

    def matches(self, title: str) -> bool:
        return self.pattern.match(title) is not None


def prefix_rule(label: str, *prefixes: str) -> LabelRule:
    """Build a rule matching any of `prefixes` followed by a colon."""

    alternatives = "|".join(re.escape(p) for p in prefixes)
    return LabelRule(pattern=re.compile(rf"^(?:{alternatives}):", re.IGNORECASE), label=label)


DEFAULT_LABEL_RULES: tuple[LabelRule, ...] = (
    prefix_rule(LABEL_BUG, "BUG", "FIX", "BUGFIX"),
    prefix_rule(LABEL_FEATURE, "FEAT", "FEATURE"),
    prefix_rule(LABEL_DOCUMENTATION, "DOCS", "DOCUMENTATION"),
    prefix_rule(LABEL_REFACTOR, "REFACTOR"),
    prefix_rule(LABEL_TESTING, "TEST", "TESTS"),
    prefix_rule(LABEL_CHORE, "CHORE"),
)


def labels_for_title(title: str, rules: Sequence[LabelRule] = DEFAULT_LABEL_RULES) -> list[str]:
    """Labels implied by `title`, in rule order."""

    labels: list[str] = []
    for rule in rules:
        if rule.matches(title) and rule.label not in labels:
            labels.append(rule.label)
    return labels


def auto_label(issue: Issue, rules: Sequence[LabelRule] = DEFAULT_LABEL_RULES) -> Issue:
    """Merge the title's labels into `issue.labels` (deduplicated, sorted)."""

    merged = set(issue.labels)
    merged.update(labels_for_title(issue.title, rules))
    issue.labels = sorted(merged)
    return issue
