"""Kafka transport built on confluent-kafka."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from confluent_kafka import Consumer, KafkaError, Producer, TopicPartition
from confluent_kafka.admin import AdminClient, NewTopic

from quorahub.core.events.event_types import TOPICS, TopicSpec
from quorahub.platform.broker.base import Broker, ChannelConsumer, Message

logger = logging.getLogger(__name__)


class KafkaBroker(Broker):
    """
    Kafka producer plus per-member consumers for the listener groups.

    Sends are asynchronous: ``produce`` enqueues into the client buffer
    (batched per ``linger.ms`` / ``batch.size``) and delivery reports are
    only logged.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        client_id: str = "quorahub",
        producer_config: Optional[Dict[str, Any]] = None,
        topics: Optional[Mapping[str, TopicSpec]] = None,
    ) -> None:
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self.topics = dict(topics if topics is not None else TOPICS)
        config = {
            "bootstrap.servers": bootstrap_servers,
            "client.id": client_id,
            "acks": "all",
            "retries": 3,
            "linger.ms": 10,
            "batch.size": 32768,
            "compression.type": "snappy",
        }
        config.update(producer_config or {})
        self.producer = Producer(config)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "KafkaBroker":
        return cls(
            bootstrap_servers=config.get("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            client_id=config.get("KAFKA_CLIENT_ID", "quorahub"),
            producer_config={
                "acks": config.get("KAFKA_ACKS", "all"),
                "retries": config.get("KAFKA_RETRIES", 3),
                "linger.ms": config.get("KAFKA_LINGER_MS", 10),
                "batch.size": config.get("KAFKA_BATCH_SIZE", 32768),
                "compression.type": config.get("KAFKA_COMPRESSION_TYPE", "snappy"),
            },
        )

    def send(self, channel: str, key: Optional[str], value: bytes) -> None:
        self.producer.produce(
            topic=channel,
            key=key.encode("utf-8") if key is not None else None,
            value=value,
            on_delivery=self._delivery_report,
        )
        # Serve delivery callbacks from earlier sends without blocking.
        self.producer.poll(0)

    def _delivery_report(self, err, msg) -> None:
        if err is not None:
            logger.error("Event delivery failed for %s: %s", msg.topic(), err)
        else:
            logger.debug(
                "Event delivered to %s [%s] at offset %s",
                msg.topic(),
                msg.partition(),
                msg.offset(),
            )

    def flush(self, timeout: float = 10.0) -> int:
        remaining = self.producer.flush(timeout)
        if remaining > 0:
            logger.warning("%s events still buffered after flush", remaining)
        return remaining

    def consumer(self, channel: str, group_id: str, member: int = 0, members: int = 1) -> "KafkaChannelConsumer":
        # Partition assignment is left to the group coordinator.
        consumer = Consumer(
            {
                "bootstrap.servers": self.bootstrap_servers,
                "group.id": group_id,
                "client.id": f"{self.client_id}-{channel}-{member}",
                "auto.offset.reset": "earliest",
                "enable.auto.commit": False,
            }
        )
        consumer.subscribe([channel])
        return KafkaChannelConsumer(consumer, channel)

    def ensure_topics(self, timeout: float = 10.0) -> Dict[str, bool]:
        """Create any missing topics with their partition, replica and retention settings."""
        admin = AdminClient({"bootstrap.servers": self.bootstrap_servers})
        existing = admin.list_topics(timeout=timeout).topics
        missing = [
            NewTopic(
                spec.name,
                num_partitions=spec.partitions,
                replication_factor=spec.replicas,
                config={"retention.ms": str(spec.retention_ms)},
            )
            for spec in self.topics.values()
            if spec.name not in existing
        ]
        results = {name: True for name in self.topics if name in existing}
        if not missing:
            return results

        for topic, future in admin.create_topics(missing).items():
            try:
                future.result()
                logger.info("Topic %s created", topic)
                results[topic] = True
            except Exception as exc:
                logger.warning("Failed to create topic %s: %s", topic, exc)
                results[topic] = False
        return results


class KafkaChannelConsumer(ChannelConsumer):
    def __init__(self, consumer: Consumer, channel: str) -> None:
        self._consumer = consumer
        self.channel = channel

    def poll(self, timeout: float) -> Optional[Message]:
        msg = self._consumer.poll(timeout)
        if msg is None:
            return None
        if msg.error():
            if msg.error().code() != KafkaError._PARTITION_EOF:
                logger.error("Consumer error on %s: %s", self.channel, msg.error())
            return None
        key = msg.key()
        return Message(
            channel=msg.topic(),
            key=key.decode("utf-8") if key is not None else None,
            value=msg.value(),
            partition=msg.partition(),
            offset=msg.offset(),
        )

    def commit(self, message: Message) -> None:
        self._consumer.commit(
            offsets=[TopicPartition(message.channel, message.partition, message.offset + 1)],
            asynchronous=False,
        )

    def close(self) -> None:
        self._consumer.close()
