"""Kinds of test an orchestrator can run, and how each one is started."""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from lorhammer.duration import parse_duration

logger = logging.getLogger(__name__)

Tester = Callable[["TestSpec", Sequence[Any], Any], Any]


class TestTypeError(Exception):
    """Raised when a test of an unknown type is started."""

    __test__ = False


@dataclass
class TestSpec:
    """A test as written in a config file: its type and its repeat period."""

    __test__ = False

    test_type: str = ""
    repeat_time: timedelta = field(default_factory=timedelta)

    @classmethod
    def from_json(cls, data: str | bytes | Mapping) -> TestSpec:
        """Build a test from ``{"type": ..., "repeatTime": ...}``.

        Raises ValueError on malformed JSON and DurationError on a bad repeat time.
        """
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        if not isinstance(data, Mapping):
            raise ValueError(f"test must be a JSON object, got {data!r}")
        test_type = data.get("type") or ""
        repeat_time = data.get("repeatTime") or ""
        if not isinstance(test_type, str):
            raise ValueError(f"test type must be a string, got {test_type!r}")
        if not isinstance(repeat_time, str):
            raise ValueError(f"repeatTime must be a string, got {repeat_time!r}")
        return cls(test_type=test_type, repeat_time=parse_duration(repeat_time))


def _start_none(test: TestSpec, init: Sequence[Any], mqtt_client: Any) -> int:
    """Launch no scenario; return how many scenario inits were skipped."""
    skipped = len(init)
    logger.warning("Nothing to test (type none), %d scenario(s) skipped", skipped)
    return skipped


_TESTERS: dict[str, Tester] = {
    "none": _start_none,
}


def register_tester(test_type: str, tester: Tester) -> None:
    """Register ``tester(test, init, mqtt_client)`` for ``test_type``."""
    _TESTERS[test_type] = tester


def start(test: TestSpec, init: Sequence[Any], mqtt_client: Any) -> threading.Thread:
    """Run the tester of ``test`` in a background thread and return that thread."""
    tester = _TESTERS.get(test.test_type)
    if tester is None:
        raise TestTypeError(f"Unknown test type {test.test_type}")
    thread = threading.Thread(
        target=tester,
        args=(test, init, mqtt_client),
        name=f"tester-{test.test_type}",
        daemon=True,
    )
    thread.start()
    return thread