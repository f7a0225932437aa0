"""JSON log records on stderr.

Stdout is reserved for command output (`publish markdown > ISSUES.md`), so the
CLI's diagnostics never mix with what it prints.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any, TextIO

# Anything on a record beyond these came from `extra=`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


def parse_level(name: str) -> int:
    """Map a level name such as "info" or "WARNING" to its number.

    Raises:
        ValueError: for names the logging module does not define.
    """

    try:
        return logging.getLevelNamesMapping()[name.strip().upper()]
    except KeyError:
        raise ValueError(f"unknown log level {name!r}") from None


class JsonFormatter(logging.Formatter):
    """One JSON object per record; `extra=` fields are nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Issue models and paths end up in `extra`.
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: TextIO | None = None) -> logging.Handler:
    """Install a single JSON handler on the root logger and return it."""

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream=sys.stderr if stream is None else stream)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(parse_level(level))

    # PyGithub logs every request at DEBUG.
    logging.getLogger("github").setLevel(max(root.level, logging.INFO))
    return handler
