"""Report of one test run, appended as JSON to a report file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any


def _jsonable(value: Any) -> Any:
    if value is None:
        return None
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    details = getattr(value, "details", None)
    if callable(details):
        return details()
    return value


def _check_list(items: list[Any] | None) -> list[Any] | None:
    if items is None:
        return None
    return [_jsonable(item) for item in items]


@dataclass
class TestReport:
    """Everything known about one test: its dates, its input and its check results."""

    __test__ = False

    start_date: datetime
    end_date: datetime
    input: Any = None
    checks_success: list[Any] | None = None
    checks_error: list[Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the report as a JSON-ready dictionary."""
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "input": _jsonable(self.input),
            "checksSuccess": _check_list(self.checks_success),
            "checksError": _check_list(self.checks_error),
        }

    def write_file(self, path: str | os.PathLike) -> None:
        """Append the report, as indented JSON, to ``path``; create it (mode 0600) if needed."""
        serialized = json.dumps(self.to_dict(), indent=4)
        fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(serialized)