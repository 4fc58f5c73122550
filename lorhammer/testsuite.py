"""Test suites: the scenarios an orchestrator runs, read from a JSON file."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any
from uuid import uuid4

from lorhammer.deploy import DeployModel
from lorhammer.duration import parse_duration
from lorhammer.provisioning import ProvisioningModel
from lorhammer.testtype import TestSpec

_MICROSECOND = timedelta(microseconds=1)


def _nanoseconds(value: timedelta) -> int:
    return (value // _MICROSECOND) * 1_000


@dataclass
class TestSuite:
    """One scenario to run, with its timings, checks, provisioning and deployment."""

    __test__ = False

    uuid: str
    test: TestSpec
    stop_all_lorhammer_time: timedelta
    sleep_before_check_time: timedelta
    shutdown_all_lorhammer_time: timedelta
    sleep_at_end_time: timedelta
    required_lorhammer: int
    max_wait_lorhammer_time: timedelta
    init: list[Any] = field(default_factory=list)
    check: Any = None
    provisioning: ProvisioningModel = field(default_factory=ProvisioningModel)
    deploy: DeployModel = field(default_factory=DeployModel)

    def to_dict(self) -> dict[str, Any]:
        """Return the suite as a JSON-ready dictionary; durations are in nanoseconds."""
        return {
            "uuid": self.uuid,
            "test": {
                "type": self.test.test_type,
                "repeatTime": _nanoseconds(self.test.repeat_time),
            },
            "stopAllLorhammerTime": _nanoseconds(self.stop_all_lorhammer_time),
            "sleepBeforeCheckTime": _nanoseconds(self.sleep_before_check_time),
            "shutdownAllLorhammerTime": _nanoseconds(self.shutdown_all_lorhammer_time),
            "sleepAtEndTime": _nanoseconds(self.sleep_at_end_time),
            "requieredLorhammer": self.required_lorhammer,
            "maxWaitLorhammerTime": _nanoseconds(self.max_wait_lorhammer_time),
            "init": self.init,
            "check": self.check,
            "provisioning": {
                "type": self.provisioning.type,
                "config": self.provisioning.config,
            },
            "deploy": {"type": self.deploy.type, "config": self.deploy.config},
        }


def _duration(item: Mapping, key: str) -> timedelta:
    value = item.get(key) or ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return parse_duration(value)


def _suite(item: Any) -> TestSuite:
    if not isinstance(item, Mapping):
        raise ValueError(f"test suite must be a JSON object, got {item!r}")

    test = TestSpec.from_json(item["test"]) if "test" in item else TestSpec()
    required = item.get("requieredLorhammer", 0)
    if required is None:
        required = 0
    if isinstance(required, bool) or not isinstance(required, int):
        raise ValueError(f"requieredLorhammer must be an integer, got {required!r}")
    init = item.get("init") or []
    if not isinstance(init, list):
        raise ValueError(f"init must be a JSON array, got {init!r}")

    return TestSuite(
        uuid=str(uuid4()),
        test=test,
        stop_all_lorhammer_time=_duration(item, "stopAllLorhammerTime"),
        sleep_before_check_time=_duration(item, "sleepBeforeCheckTime"),
        shutdown_all_lorhammer_time=_duration(item, "shutdownAllLorhammerTime"),
        sleep_at_end_time=_duration(item, "sleepAtEndTime"),
        required_lorhammer=required,
        max_wait_lorhammer_time=_duration(item, "maxWaitLorhammerTime"),
        init=init,
        check=item.get("check"),
        provisioning=ProvisioningModel.from_json(item.get("provisioning") or {}),
        deploy=DeployModel.from_json(item.get("deploy") or {}),
    )


def from_file(config: str | bytes) -> list[TestSuite]:
    """Parse a JSON array of test suites; each gets a fresh UUID.

    Raises ValueError (including DurationError) when any suite is malformed.
    """
    data = json.loads(config)
    if not isinstance(data, list):
        raise ValueError(f"test suite file must hold a JSON array, got {data!r}")
    return [_suite(item) for item in data]