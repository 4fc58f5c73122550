"""Deployment of lorhammer on remote servers through scp and ssh."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str]], bytes]

_SSH_OPTIONS = ("-o", "StrictHostKeyChecking=no", "-o", "UserKnownHostsFile=/dev/null")
_COMMAND_ERRORS = (OSError, subprocess.SubprocessError)


def run_command(args: Sequence[str]) -> bytes:
    """Run ``args`` and return its combined output; raise if it fails."""
    completed = subprocess.run(
        list(args), stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=True
    )
    return completed.stdout


def _load_config(serialized: Any) -> dict:
    if isinstance(serialized, (str, bytes, bytearray)):
        serialized = json.loads(serialized)
    if not isinstance(serialized, dict):
        raise ValueError(f"deployer config must be a JSON object, got {serialized!r}")
    return serialized


def _output_of(error: BaseException) -> str:
    output = getattr(error, "output", None)
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return "" if output is None else str(output)


class DistantRunError(Exception):
    """Gathers every failure of commands run on remote servers."""

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(self.errors)

    def __str__(self) -> str:
        return "DistantRunError: \n" + "".join(f" \n {err}" for err in self.errors)


@dataclass
class DistantInstance:
    """One remote server where lorhammer is copied and started."""

    ssh_key_path: str = ""
    user: str = ""
    ip_server: str = ""
    path_file: str = ""
    path_where_scp: str = ""
    before_cmd: str = ""
    after_cmd: str = ""
    nb_distant_to_launch: int = 0

    @property
    def target(self) -> str:
        return f"{self.user}@{self.ip_server}"

    def run_cmd(self, cmd: str, runner: Runner) -> None:
        """Run ``cmd`` over ssh ``nb_distant_to_launch`` times in parallel.

        Raises DistantRunError holding every failure.
        """
        args = ["ssh", "-q", *_SSH_OPTIONS, self.target, cmd]
        logger.info("Will exec cmd %s", " ".join(args))

        def run_once(_: int) -> BaseException | None:
            try:
                runner(args)
            except _COMMAND_ERRORS as err:
                logger.info("Ssh output %s", _output_of(err))
                return err
            return None

        count = max(self.nb_distant_to_launch, 0)
        if count == 0:
            return
        with ThreadPoolExecutor(max_workers=count) as pool:
            results = list(pool.map(run_once, range(count)))
        errors = [err for err in results if err is not None]
        if errors:
            raise DistantRunError(errors)


def _instance_from_dict(data: dict) -> DistantInstance:
    return DistantInstance(
        ssh_key_path=data.get("sshKeyPath", ""),
        user=data.get("user", ""),
        ip_server=data.get("ipServer", ""),
        path_file=data.get("pathFile", ""),
        path_where_scp=data.get("pathWhereScp", ""),
        before_cmd=data.get("beforeCmd", ""),
        after_cmd=data.get("afterCmd", ""),
        nb_distant_to_launch=int(data.get("nbDistantToLaunch", 0)),
    )


@dataclass
class DistantDeployer:
    """Copies lorhammer to remote servers and runs commands before and after."""

    instances: list[DistantInstance] = field(default_factory=list)
    runner: Runner = run_command

    @classmethod
    def from_json(cls, serialized: Any, mqtt_client: Any = None) -> DistantDeployer:
        """Build a deployer from its JSON config (``{"instances": [...]}``)."""
        config = _load_config(serialized)
        raw_instances = config.get("instances") or []
        if not isinstance(raw_instances, list):
            raise ValueError("instances must be a JSON array")
        return cls(instances=[_instance_from_dict(item) for item in raw_instances])

    def run_before(self) -> None:
        """Run every instance's before command."""
        for instance in self.instances:
            instance.run_cmd(instance.before_cmd, self.runner)

    def deploy(self) -> None:
        """Copy the lorhammer binary to every instance with scp."""
        for instance in self.instances:
            destination = f"{instance.target}:{instance.path_where_scp}"
            args = [
                "scp",
                "-q",
                "-i",
                instance.ssh_key_path,
                *_SSH_OPTIONS,
                instance.path_file,
                destination,
            ]
            logger.info("Will exec cmd %s", " ".join(args))
            try:
                self.runner(args)
            except _COMMAND_ERRORS as err:
                logger.info("Scp output %s", _output_of(err))
                raise

    def run_after(self) -> None:
        """Run every instance's after command."""
        for instance in self.instances:
            instance.run_cmd(instance.after_cmd, self.runner)