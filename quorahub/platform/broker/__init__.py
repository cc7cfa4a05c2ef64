"""Event transports: in-process for development/tests, Kafka for deployments."""

from __future__ import annotations

from typing import Any, Mapping

from quorahub.platform.broker.base import Broker, ChannelConsumer, Message
from quorahub.platform.broker.memory import InMemoryBroker


def create_broker(config: Mapping[str, Any]) -> Broker:
    """Build the transport named by ``EVENT_BROKER``."""
    kind = (config.get("EVENT_BROKER") or "memory").lower()
    if kind == "memory":
        return InMemoryBroker()
    if kind == "kafka":
        from quorahub.platform.broker.kafka import KafkaBroker  # local import: loads librdkafka only when selected

        return KafkaBroker.from_config(config)
    raise ValueError(f"unknown EVENT_BROKER: {kind}")


__all__ = [
    "Broker",
    "ChannelConsumer",
    "InMemoryBroker",
    "Message",
    "create_broker",
]
