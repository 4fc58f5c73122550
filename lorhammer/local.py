"""Deployment of lorhammer instances on the local host."""

from __future__ import annotations

import json
import logging
import subprocess
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Launcher = Callable[[Sequence[str]], Any]

_CLEAN_SCRIPT = "if pgrep lorhammer; then pkill lorhammer; fi"
_COMMAND_ERRORS = (OSError, subprocess.SubprocessError)


def _load_config(serialized: Any) -> dict:
    if isinstance(serialized, (str, bytes, bytearray)):
        serialized = json.loads(serialized)
    if not isinstance(serialized, dict):
        raise ValueError(f"deployer config must be a JSON object, got {serialized!r}")
    return serialized


def _launch(args: Sequence[str]) -> subprocess.Popen:
    return subprocess.Popen(list(args))


def _is_finished(process: Any) -> bool:
    poll = getattr(process, "poll", None)
    if poll is None:
        return False
    try:
        return poll() is not None
    except _COMMAND_ERRORS:
        return True


class LocalRunError(Exception):
    """Gathers every failure to start a local lorhammer instance."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(self.errors)

    def __str__(self) -> str:
        return "LocalRunError: \n" + "".join(f" \n {err}" for err in self.errors)


@dataclass
class LocalDeployer:
    """Starts lorhammer processes on this host."""

    path_file: str = ""
    nb_instance_to_launch: int = 0
    clean_previous_instances: bool = False
    port: int = 0
    mqtt_address: str = ""
    launcher: Launcher = field(default=_launch)
    processes: list = field(default_factory=list, init=False, repr=False, compare=False)

    @classmethod
    def from_json(cls, serialized: Any, mqtt_client: Any) -> LocalDeployer:
        """Build a deployer from its JSON config and the broker address of ``mqtt_client``."""
        config = _load_config(serialized)
        return cls(
            path_file=config.get("pathFile", ""),
            nb_instance_to_launch=int(config.get("nbInstanceToLaunch", 0)),
            clean_previous_instances=bool(config.get("cleanPreviousInstances", False)),
            port=int(config.get("port", 0)),
            mqtt_address=mqtt_client.address,
        )

    def run_before(self) -> None:
        """Kill previous lorhammer processes when asked to; failures are ignored."""
        if not self.clean_previous_instances:
            return
        try:
            process = self.launcher(["bash", "-c", _CLEAN_SCRIPT])
            process.wait()
        except _COMMAND_ERRORS as err:
            logger.debug("Cleaning previous instances failed: %s", err)

    def _args(self) -> list[str]:
        args = [self.path_file, "-mqtt", self.mqtt_address]
        if self.port != 0:
            args += ["-port", str(self.port)]
        return args

    def deploy(self) -> None:
        """Start ``nb_instance_to_launch`` processes; raise LocalRunError for those that fail."""
        errors: list[BaseException] = []
        for _ in range(self.nb_instance_to_launch):
            args = self._args()
            logger.debug("Will exec cmd %s (nb %d)", args, self.nb_instance_to_launch)
            try:
                process = self.launcher(args)
            except _COMMAND_ERRORS as err:
                logger.error("Local output error when launching: %s", err)
                errors.append(err)
                continue
            self.processes.append(process)
            threading.Thread(target=self._wait, args=(process,), daemon=True).start()
        if errors:
            raise LocalRunError(errors)

    @staticmethod
    def _wait(process: Any) -> None:
        try:
            code = process.wait()
        except _COMMAND_ERRORS as err:
            logger.error("Local output error when wait: %s", err)
            return
        if code:
            logger.error("Local output error when wait: exit status %s", code)

    def run_after(self) -> None:
        """Forget the launched processes that have already finished."""
        self.processes = [p for p in self.processes if not _is_finished(p)]