"""Metrics exported by the orchestrator."""

from __future__ import annotations

import threading

_GAUGES = (
    ("orchestrator_mqtt_ok", "Count MQTT messages OK."),
    ("orchestrator_mqtt_failed", "Count MQTT messages failed."),
)


class OrchestratorMetrics:
    """Counts MQTT messages and renders them in the Prometheus text format."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values = {name: 0 for name, _ in _GAUGES}

    @property
    def mqtt_messages_ok(self) -> int:
        with self._lock:
            return self._values["orchestrator_mqtt_ok"]

    @property
    def mqtt_messages_failed(self) -> int:
        with self._lock:
            return self._values["orchestrator_mqtt_failed"]

    def _add(self, name: str) -> None:
        with self._lock:
            self._values[name] += 1

    def add_mqtt_message_ok(self) -> None:
        """Count one MQTT message handled successfully."""
        self._add("orchestrator_mqtt_ok")

    def add_mqtt_message_failed(self) -> None:
        """Count one MQTT message that failed."""
        self._add("orchestrator_mqtt_failed")

    def render(self) -> str:
        """Return the metrics in the Prometheus text exposition format."""
        with self._lock:
            values = dict(self._values)
        lines = []
        for name, help_text in _GAUGES:
            lines.append(f"# HELP {name} {help_text}")
            lines.append(f"# TYPE {name} gauge")
            lines.append(f"{name} {values[name]}")
        return "\n".join(lines) + "\n"