"""Choice and run of a deployer described in a test-suite file."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from lorhammer.distant import DistantDeployer
from lorhammer.local import LocalDeployer


class DeployError(Exception):
    """Raised when a deployer cannot be chosen."""


class Deployer(Protocol):
    def run_before(self) -> None: ...

    def deploy(self) -> None: ...

    def run_after(self) -> None: ...


DeployerFactory = Callable[[Any, Any], Deployer]


@dataclass
class DeployModel:
    """A deployer as written in a config file: its type and raw config."""

    type: str = ""
    config: Any = None

    @classmethod
    def from_json(cls, data: str | bytes | Mapping) -> DeployModel:
        """Build a model from a JSON object with ``type`` and ``config`` keys."""
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        if not isinstance(data, Mapping):
            raise ValueError(f"deploy model must be a JSON object, got {data!r}")
        return cls(type=data.get("type", "") or "", config=data.get("config"))


class NoneDeployer:
    """A deployer that deploys nothing; it only records the stages it went through."""

    def __init__(self) -> None:
        self.stages: list[str] = []

    def run_before(self) -> None:
        """Record the before stage."""
        self.stages.append("run_before")

    def deploy(self) -> None:
        """Record the deploy stage."""
        self.stages.append("deploy")

    def run_after(self) -> None:
        """Record the after stage."""
        self.stages.append("run_after")


def _new_none(config: Any, mqtt_client: Any) -> NoneDeployer:
    return NoneDeployer()


_DEPLOYERS: dict[str, DeployerFactory] = {
    "none": _new_none,
    "distant": DistantDeployer.from_json,
    "local": LocalDeployer.from_json,
}


def register_deployer(deploy_type: str, factory: DeployerFactory) -> None:
    """Register ``factory(config, mqtt_client)`` for ``deploy_type``."""
    _DEPLOYERS[deploy_type] = factory


def start(model: DeployModel, mqtt_client: Any) -> Deployer:
    """Build the deployer for ``model`` and run it; return the deployer used."""
    factory = _DEPLOYERS.get(model.type)
    if factory is None:
        raise DeployError(f"Unknown type {model.type} for deployer")
    deployer = factory(model.config, mqtt_client)
    deployer.run_before()
    deployer.deploy()
    deployer.run_after()
    return deployer