from types import SimpleNamespace

import pytest

from lorhammer.mqtt import MqttClient, new_mqtt


class FakeClient:
    def __init__(self, connect_rc=0, subscribe_rc=0):
        self.connect_rc = connect_rc
        self.subscribe_rc = subscribe_rc
        self.calls = []
        self.callbacks = {}
        self.subscriptions = None

    def connect(self, host, port):
        self.calls.append(("connect", host, port))
        return self.connect_rc

    def tls_set(self):
        self.calls.append(("tls_set",))

    def loop_start(self):
        self.calls.append(("loop_start",))

    def loop_stop(self):
        self.calls.append(("loop_stop",))

    def disconnect(self):
        self.calls.append(("disconnect",))

    def message_callback_add(self, topic, callback):
        self.callbacks[topic] = callback

    def subscribe(self, filters):
        self.subscriptions = filters
        return self.subscribe_rc, 1

    def publish(self, topic, payload, qos, retain):
        self.calls.append(("publish", topic, payload, qos, retain))


def test_new_mqtt_valid_config():
    mqtt = new_mqtt("", "")
    assert mqtt.address == ""
    assert mqtt.client_id.startswith("_")


def test_new_mqtt_ids_differ():
    assert new_mqtt("host", "").client_id != new_mqtt("host", "").client_id
    assert new_mqtt("host", "").client_id.startswith("host_")


def test_connect_parses_url():
    fake = FakeClient()
    mqtt = MqttClient("tcp://broker.example.com:1884", "id", fake)
    mqtt.connect()
    assert fake.calls == [("connect", "broker.example.com", 1884), ("loop_start",)]


def test_connect_tls_default_port():
    fake = FakeClient()
    MqttClient("ssl://broker.example.com", "id", fake).connect()
    assert fake.calls[0] == ("tls_set",)
    assert fake.calls[1] == ("connect", "broker.example.com", 8883)


def test_connect_without_host_fails():
    with pytest.raises(ValueError):
        MqttClient("", "id", FakeClient()).connect()


def test_connect_error_code():
    with pytest.raises(ConnectionError):
        MqttClient("tcp://broker.example.com:1883", "id", FakeClient(connect_rc=1)).connect()


def test_disconnect():
    fake = FakeClient()
    MqttClient("tcp://broker.example.com:1883", "id", fake).disconnect()
    assert fake.calls == [("disconnect",), ("loop_stop",)]


def test_handle_subscribes_and_dispatches():
    fake = FakeClient()
    received = []
    MqttClient("", "id", fake).handle(["/a", "/b"], received.append)
    assert fake.subscriptions == [("/a", 0), ("/b", 0)]
    fake.callbacks["/b"](fake, None, SimpleNamespace(payload=b"hello"))
    assert received == [b"hello"]


def test_handle_subscribe_error():
    with pytest.raises(ConnectionError):
        MqttClient("", "id", FakeClient(subscribe_rc=4)).handle(["/a"], print)


def test_publish_encodes_text():
    fake = FakeClient()
    MqttClient("", "id", fake).publish("/lorhammer", "msg")
    assert fake.calls == [("publish", "/lorhammer", b"msg", 0, False)]