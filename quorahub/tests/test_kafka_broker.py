"""KafkaBroker against stubbed confluent-kafka clients (no cluster needed)."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit

from confluent_kafka import KafkaError

from quorahub.core.events.event_types import ANSWER_EVENTS, TOPICS
from quorahub.platform.broker import create_broker
from quorahub.platform.broker import kafka as kafka_module
from quorahub.platform.broker.base import Message


class FakeProducer:
    instances = []

    def __init__(self, config):
        self.config = config
        self.produced = []
        self.polled = 0
        FakeProducer.instances.append(self)

    def produce(self, topic, key=None, value=None, on_delivery=None):
        self.produced.append((topic, key, value))
        self.on_delivery = on_delivery

    def poll(self, timeout):
        self.polled += 1
        return 0

    def flush(self, timeout):
        return 0


class FakeRecord:
    def __init__(self, topic, key, value, partition=0, offset=0, error=None):
        self._topic, self._key, self._value = topic, key, value
        self._partition, self._offset, self._error = partition, offset, error

    def topic(self):
        return self._topic

    def key(self):
        return self._key

    def value(self):
        return self._value

    def partition(self):
        return self._partition

    def offset(self):
        return self._offset

    def error(self):
        return self._error


class FakeError:
    def __init__(self, code):
        self._code = code

    def code(self):
        return self._code

    def __str__(self):
        return f"error {self._code}"


class FakeConsumer:
    def __init__(self, config):
        self.config = config
        self.subscribed = []
        self.queue = []
        self.commits = []
        self.closed = False

    def subscribe(self, topics):
        self.subscribed = list(topics)

    def poll(self, timeout):
        return self.queue.pop(0) if self.queue else None

    def commit(self, offsets=None, asynchronous=True):
        self.commits.append((offsets, asynchronous))

    def close(self):
        self.closed = True


@pytest.fixture
def fakes(monkeypatch):
    FakeProducer.instances = []
    monkeypatch.setattr(kafka_module, "Producer", FakeProducer)
    monkeypatch.setattr(kafka_module, "Consumer", FakeConsumer)


def test_from_config_maps_producer_settings(fakes):
    broker = create_broker(
        {
            "EVENT_BROKER": "kafka",
            "KAFKA_BOOTSTRAP_SERVERS": "kafka-1:9092",
            "KAFKA_CLIENT_ID": "api",
            "KAFKA_ACKS": "all",
            "KAFKA_RETRIES": 3,
            "KAFKA_LINGER_MS": 10,
            "KAFKA_BATCH_SIZE": 32768,
            "KAFKA_COMPRESSION_TYPE": "snappy",
        }
    )

    assert isinstance(broker, kafka_module.KafkaBroker)
    config = FakeProducer.instances[0].config
    assert config["bootstrap.servers"] == "kafka-1:9092"
    assert config["client.id"] == "api"
    assert (config["acks"], config["retries"], config["linger.ms"]) == ("all", 3, 10)
    assert (config["batch.size"], config["compression.type"]) == (32768, "snappy")


def test_send_encodes_key_and_serves_callbacks(fakes):
    broker = kafka_module.KafkaBroker("localhost:9092")
    broker.send(ANSWER_EVENTS, "55", b'{"eventType":"ANSWER_CREATED"}')

    producer = FakeProducer.instances[0]
    assert producer.produced == [(ANSWER_EVENTS, b"55", b'{"eventType":"ANSWER_CREATED"}')]
    assert producer.polled == 1


def test_send_without_key(fakes):
    broker = kafka_module.KafkaBroker("localhost:9092")
    broker.send(ANSWER_EVENTS, None, b"{}")
    assert FakeProducer.instances[0].produced[0][1] is None


def test_delivery_failure_is_logged(fakes, caplog):
    broker = kafka_module.KafkaBroker("localhost:9092")
    broker.send(ANSWER_EVENTS, "1", b"{}")
    callback = FakeProducer.instances[0].on_delivery

    callback("timed out", FakeRecord(ANSWER_EVENTS, b"1", b"{}"))

    assert any("Event delivery failed for answer-events" in r.getMessage() for r in caplog.records)


def test_consumer_subscribes_with_manual_commits(fakes):
    broker = kafka_module.KafkaBroker("localhost:9092", client_id="worker")
    consumer = broker.consumer(ANSWER_EVENTS, "quora-app-group", member=2, members=3)

    raw = consumer._consumer
    assert raw.subscribed == [ANSWER_EVENTS]
    assert raw.config["group.id"] == "quora-app-group"
    assert raw.config["enable.auto.commit"] is False
    assert raw.config["auto.offset.reset"] == "earliest"
    assert raw.config["client.id"] == "worker-answer-events-2"


def test_consumer_poll_and_commit(fakes):
    broker = kafka_module.KafkaBroker("localhost:9092")
    consumer = broker.consumer(ANSWER_EVENTS, "g")
    consumer._consumer.queue = [
        FakeRecord(ANSWER_EVENTS, None, b"eof", error=FakeError(KafkaError._PARTITION_EOF)),
        FakeRecord(ANSWER_EVENTS, b"55", b"{}", partition=3, offset=41),
    ]

    assert consumer.poll(0.1) is None
    message = consumer.poll(0.1)
    assert message == Message(channel=ANSWER_EVENTS, key="55", value=b"{}", partition=3, offset=41)

    consumer.commit(message)
    offsets, asynchronous = consumer._consumer.commits[0]
    assert asynchronous is False
    assert (offsets[0].topic, offsets[0].partition, offsets[0].offset) == (ANSWER_EVENTS, 3, 42)

    consumer.close()
    assert consumer._consumer.closed


def test_ensure_topics_creates_missing(fakes, monkeypatch):
    created = {}

    class FakeFuture:
        def __init__(self, fail=False):
            self.fail = fail

        def result(self):
            if self.fail:
                raise RuntimeError("replication factor too large")

    class FakeAdmin:
        def __init__(self, config):
            pass

        def list_topics(self, timeout):
            return type("Meta", (), {"topics": {ANSWER_EVENTS: object()}})()

        def create_topics(self, new_topics):
            for topic in new_topics:
                created[topic.topic] = topic
            return {t.topic: FakeFuture(fail=t.topic == "audit-log-events") for t in new_topics}

    monkeypatch.setattr(kafka_module, "AdminClient", FakeAdmin)
    results = kafka_module.KafkaBroker("localhost:9092").ensure_topics(timeout=1)

    assert results[ANSWER_EVENTS] is True
    assert results["audit-log-events"] is False
    assert set(created) == set(TOPICS) - {ANSWER_EVENTS}
    assert created["question-events"].num_partitions == 5


def test_unknown_broker_kind_rejected():
    with pytest.raises(ValueError):
        create_broker({"EVENT_BROKER": "carrier-pigeon"})
