"""Choice and lifetime of the provisioner of each running test."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from lorhammer.http_provisioner import HttpProvisioner


class ProvisioningError(Exception):
    """Raised when provisioning cannot be done."""


class Provisioner(Protocol):
    def provision(self, sensors_to_register: Any) -> None: ...

    def deprovision(self) -> None: ...


ProvisionerFactory = Callable[[Any], Provisioner]


@dataclass
class ProvisioningModel:
    """A provisioner as written in a config file: its type and raw config."""

    type: str = ""
    config: Any = None

    @classmethod
    def from_json(cls, data: str | bytes | Mapping) -> ProvisioningModel:
        """Build a model from a JSON object with ``type`` and ``config`` keys."""
        if isinstance(data, (str, bytes, bytearray)):
            data = json.loads(data)
        if not isinstance(data, Mapping):
            raise ValueError(f"provisioning model must be a JSON object, got {data!r}")
        return cls(type=data.get("type", "") or "", config=data.get("config"))


class NoneProvisioner:
    """A provisioner that talks to no server; it only keeps what it was given."""

    def __init__(self) -> None:
        self.registered: list[Any] = []

    def provision(self, sensors_to_register: Any) -> None:
        """Keep ``sensors_to_register`` in memory."""
        self.registered.append(sensors_to_register)

    def deprovision(self) -> None:
        """Forget everything kept so far."""
        self.registered.clear()


def _new_none(config: Any) -> NoneProvisioner:
    return NoneProvisioner()


_PROVISIONERS: dict[str, ProvisionerFactory] = {
    "none": _new_none,
    "http": HttpProvisioner.from_json,
}
_instances: dict[str, Provisioner] = {}
_lock = threading.Lock()


def register_provisioner(provisioner_type: str, factory: ProvisionerFactory) -> None:
    """Register ``factory(config)`` for ``provisioner_type``."""
    _PROVISIONERS[provisioner_type] = factory


def provision(uuid: str, model: ProvisioningModel, sensors_to_register: Any) -> None:
    """Provision sensors with the provisioner of test ``uuid``, built on first use."""
    factory = _PROVISIONERS.get(model.type)
    if factory is None:
        raise ProvisioningError("Unknown Provisioning type")
    with _lock:
        instance = _instances.get(uuid)
        if instance is None:
            instance = factory(model.config)
            _instances[uuid] = instance
    instance.provision(sensors_to_register)


def deprovision(uuid: str) -> None:
    """Undo every provisioning of test ``uuid`` and forget its provisioner."""
    with _lock:
        instance = _instances.pop(uuid, None)
    if instance is None:
        raise ProvisioningError("You must Provision before DeProvision")
    instance.deprovision()


def is_provisioned(uuid: str) -> bool:
    """Tell whether test ``uuid`` has a live provisioner."""
    with _lock:
        return uuid in _instances