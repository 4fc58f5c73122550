"""Provisioning of sensors through a user-supplied HTTP API."""

from __future__ import annotations

import dataclasses
import json
import logging
import warnings
from collections.abc import Callable, Mapping
from typing import Any

import requests

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 60.0
CONTENT_TYPE = "application/json"

Post = Callable[[str, str, bytes], Any]


def _default_post(url: str, content_type: str, body: bytes) -> requests.Response:
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message="Unverified HTTPS request")
        return requests.post(
            url,
            data=body,
            headers={"Content-Type": content_type},
            timeout=(HTTP_TIMEOUT, HTTP_TIMEOUT),
            verify=False,
        )


def _load_config(raw_config: Any) -> Mapping:
    if raw_config is None:
        raise ValueError("missing http provisioner config")
    if isinstance(raw_config, (str, bytes, bytearray)):
        raw_config = json.loads(raw_config)
    if not isinstance(raw_config, Mapping):
        raise ValueError(f"http provisioner config must be a JSON object, got {raw_config!r}")
    return raw_config


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode(sensors: Any) -> bytes:
    return json.dumps(sensors, default=_jsonable).encode()


def _close(response: Any) -> None:
    close = getattr(response, "close", None)
    if callable(close):
        close()


class HttpProvisioner:
    """Posts sensors to a creation URL and, later, to a deletion URL."""

    def __init__(
        self,
        creation_api_url: str = "",
        deletion_api_url: str = "",
        post: Post | None = None,
    ) -> None:
        self.creation_api_url = creation_api_url
        self.deletion_api_url = deletion_api_url
        self.post = post if post is not None else _default_post
        self.sensors_registered: list[Any] = []

    @classmethod
    def from_json(cls, raw_config: Any) -> HttpProvisioner:
        """Build a provisioner from ``{"creationApiUrl": ..., "deletionApiUrl": ...}``."""
        config = _load_config(raw_config)
        return cls(
            creation_api_url=config.get("creationApiUrl", "") or "",
            deletion_api_url=config.get("deletionApiUrl", "") or "",
        )

    def _send(self, url: str, sensors: Any, action: str) -> None:
        body = _encode(sensors)
        response = self.post(url, CONTENT_TYPE, body)
        try:
            status = response.status_code
            if not 200 <= status < 300:
                logger.error(
                    "Wrong return code in HTTP %s: %s %s, data posted %s",
                    action,
                    status,
                    getattr(response, "reason", ""),
                    body.decode(errors="replace"),
                )
                raise requests.HTTPError("Wrong return code", response=response)
        finally:
            _close(response)

    def provision(self, sensors_to_register: Any) -> None:
        """Post the sensors to the creation API and remember them."""
        self._send(self.creation_api_url, sensors_to_register, "provisioning")
        self.sensors_registered.append(sensors_to_register)

    def deprovision(self) -> None:
        """Post every remembered sensor set to the deletion API."""
        for sensors in self.sensors_registered:
            self._send(self.deletion_api_url, sensors, "de-provisioning")