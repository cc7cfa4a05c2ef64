"""Configuration helpers for the event listener worker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from quorahub.core.events.event_types import ALL_CHANNELS


def _channels(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ALL_CHANNELS
    return tuple(c.strip() for c in raw.split(",") if c.strip())


@dataclass
class ListenerConfig:
    """Runtime knobs for the listener containers."""

    group_id: str = "quora-app-group"
    concurrency: int = 3
    poll_timeout: float = 3.0
    channels: Tuple[str, ...] = field(default_factory=lambda: ALL_CHANNELS)

    @classmethod
    def from_env(cls) -> "ListenerConfig":
        return cls(
            group_id=os.environ.get("EVENT_CONSUMER_GROUP", "quora-app-group"),
            concurrency=int(os.environ.get("EVENT_LISTENER_CONCURRENCY", "3")),
            poll_timeout=float(os.environ.get("EVENT_POLL_TIMEOUT_SECONDS", "3")),
            channels=_channels(os.environ.get("EVENT_CHANNELS")),
        )

    @classmethod
    def from_config(cls, config: Mapping) -> "ListenerConfig":
        return cls(
            group_id=config.get("EVENT_CONSUMER_GROUP", "quora-app-group"),
            concurrency=int(config.get("EVENT_LISTENER_CONCURRENCY", 3)),
            poll_timeout=float(config.get("EVENT_POLL_TIMEOUT_SECONDS", 3.0)),
            channels=_channels(config.get("EVENT_CHANNELS")),
        )
