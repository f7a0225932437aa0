"""Issue model and the JSON-file backed issue store.

The store is a single JSON array at `<repository-root>/.issue_tracker.json`. It is
rewritten in full on every mutation and carries no lock: two concurrent writers
race and the last one wins.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import re
import tempfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator

from issue_tracker.errors import StoreCorrupt, StoreUnreadable, StoreUnwritable

logger = logging.getLogger(__name__)

IssueStatus = Literal["open", "closed"]

STATUS_OPEN: IssueStatus = "open"
STATUS_CLOSED: IssueStatus = "closed"

# Nanosecond timestamps ("...T10:00:00.123456789+02:00") are cut to microseconds.
_EXCESS_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class Issue(BaseModel):
    """A single locally tracked task."""

    id: int = Field(gt=0)
    title: str = Field(min_length=1)
    status: IssueStatus = Field(default=STATUS_OPEN)
    labels: list[str] = Field(default_factory=list)
    created_at: datetime

    @field_validator("labels", mode="before")
    @classmethod
    def _null_labels(cls, value: Any) -> Any:
        # Older databases store an empty label set as null.
        return [] if value is None else value

    @field_validator("created_at", mode="before")
    @classmethod
    def _truncate_fraction(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _EXCESS_FRACTION_RE.sub(r"\1", value, count=1)
        return value

    @field_serializer("labels")
    def _serialize_labels(self, labels: list[str]) -> list[str]:
        return sorted(set(labels))

    @field_serializer("created_at")
    def _serialize_created_at(self, created_at: datetime) -> str:
        return created_at.isoformat()

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN


def issues_to_json(issues: Sequence[Issue]) -> str:
    """Serialize issues as a 2-space indented JSON array."""

    payload = [issue.model_dump(mode="json") for issue in issues]
    return json.dumps(payload, indent=2, ensure_ascii=False)


class IssueStore:
    """JSON-file backed store for local issues."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Issue]:
        if not self._path.exists():
            return []

        try:
            text = self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise StoreCorrupt(self._path, f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise StoreUnreadable(self._path, str(e)) from e

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise StoreCorrupt(self._path, str(e)) from e

        if raw is None:
            return []

        if not isinstance(raw, list):
            raise StoreCorrupt(self._path, f"expected a JSON array, got {type(raw).__name__}")

        issues: list[Issue] = []
        seen: set[int] = set()
        for index, item in enumerate(raw):
            try:
                issue = Issue.model_validate(item)
            except ValidationError as e:
                raise StoreCorrupt(self._path, f"invalid issue at index {index}: {e}") from e
            if issue.id in seen:
                raise StoreCorrupt(self._path, f"duplicate issue ID #{issue.id}")
            seen.add(issue.id)
            issues.append(issue)

        logger.debug("Issues loaded", extra={"path": str(self._path), "count": len(issues)})
        return issues

    def save(self, issues: Sequence[Issue]) -> None:
        """Overwrite the database with `issues`.

        The content is written to a uniquely named sibling temporary file first
        and then moved into place, so a reader sees either the old or the new
        array, even while another writer is saving.
        """

        content = issues_to_json(issues) + "\n"
        tmp: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f"{self._path.name}.", suffix=".tmp"
            )
            tmp = Path(name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # mkstemp creates the file 0600.
            os.chmod(tmp, 0o644)
            os.replace(tmp, self._path)
        except OSError as e:
            if tmp is not None:
                with contextlib.suppress(OSError):
                    tmp.unlink(missing_ok=True)
            raise StoreUnwritable(self._path, str(e)) from e

        logger.debug("Issues saved", extra={"path": str(self._path), "count": len(issues)})

    def clear(self) -> None:
        self.save([])


def next_issue_id(issues: Sequence[Issue]) -> int:
    """One more than the largest ID in use (1 for an empty store)."""

    return max((issue.id for issue in issues), default=0) + 1
