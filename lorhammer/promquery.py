"""Queries to the Prometheus HTTP API."""

from __future__ import annotations

import time
from typing import Any, Protocol
from urllib.parse import urlsplit

import requests

QUERY_TIMEOUT = 60.0


class QueryApi(Protocol):
    def query(self, query: str, timestamp: float) -> list[float]: ...


class _HttpQueryApi:
    """Runs instant queries against ``<address>/api/v1/query``."""

    def __init__(self, address: str) -> None:
        self.address = address

    def query(self, query: str, timestamp: float) -> list[float]:
        url = self.address.rstrip("/") + "/api/v1/query"
        response = requests.get(
            url,
            params={"query": query, "time": f"{timestamp:.3f}"},
            timeout=QUERY_TIMEOUT,
        )
        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise
        if payload.get("status") != "success":
            raise RuntimeError(payload.get("error") or f"prometheus query failed: {query!r}")
        data = payload.get("data") or {}
        if data.get("resultType") != "vector":
            raise ValueError(f"expected a vector result, got {data.get('resultType')!r}")
        return [float(sample["value"][1]) for sample in data.get("result", [])]


def _check_address(address: str) -> None:
    if address.startswith(":"):
        raise ValueError(f"missing protocol scheme in {address!r}")
    parts = urlsplit(address)
    parts.port  # raises ValueError on an invalid port


class PrometheusApiClient:
    """Executes queries on Prometheus and returns a single number."""

    def __init__(self, address: str, query_api: Any = None) -> None:
        _check_address(address)
        self.address = address
        self.query_api = query_api if query_api is not None else _HttpQueryApi(address)

    def exec_query(self, query: str) -> float:
        """Return the value of the first sample of ``query``, or 0.0 when there is none."""
        values = self.query_api.query(query, time.time())
        if not values:
            return 0.0
        return float(values[0])