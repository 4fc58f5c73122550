import threading

from lorhammer.metrics import OrchestratorMetrics


def parse(text):
    values = {}
    for line in text.splitlines():
        if line.startswith("#"):
            continue
        name, value = line.split(" ")
        values[name] = int(value)
    return values


def test_render_starts_at_zero():
    metrics = OrchestratorMetrics()
    assert parse(metrics.render()) == {
        "orchestrator_mqtt_ok": 0,
        "orchestrator_mqtt_failed": 0,
    }


def test_render_has_help_and_type():
    text = OrchestratorMetrics().render()
    assert "# HELP orchestrator_mqtt_ok Count MQTT messages OK." in text.splitlines()
    assert "# HELP orchestrator_mqtt_failed Count MQTT messages failed." in text.splitlines()
    assert "# TYPE orchestrator_mqtt_ok gauge" in text.splitlines()
    assert text.endswith("\n")


def test_counts_are_independent():
    metrics = OrchestratorMetrics()
    ok_calls = 3
    failed_calls = 2
    for _ in range(ok_calls):
        metrics.add_mqtt_message_ok()
    for _ in range(failed_calls):
        metrics.add_mqtt_message_failed()
    values = parse(metrics.render())
    assert values["orchestrator_mqtt_ok"] == ok_calls
    assert values["orchestrator_mqtt_failed"] == failed_calls
    assert metrics.mqtt_messages_ok == ok_calls
    assert metrics.mqtt_messages_failed == failed_calls


def test_concurrent_increments():
    metrics = OrchestratorMetrics()
    threads_count = 8
    per_thread = 500

    def work():
        for _ in range(per_thread):
            metrics.add_mqtt_message_ok()

    threads = [threading.Thread(target=work) for _ in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert metrics.mqtt_messages_ok == threads_count * per_thread
    assert metrics.mqtt_messages_failed == 0