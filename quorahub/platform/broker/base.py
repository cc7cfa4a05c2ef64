"""Transport contracts shared by the broker implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Message:
    channel: str
    key: Optional[str]
    value: bytes
    partition: int = 0
    offset: int = 0


class ChannelConsumer(ABC):
    """One member of a listener group reading a single channel."""

    @abstractmethod
    def poll(self, timeout: float) -> Optional[Message]:
        """Return the next message, or None when nothing arrived within ``timeout``."""

    @abstractmethod
    def commit(self, message: Message) -> None:
        """Mark ``message`` (and everything before it in its partition) as consumed."""

    @abstractmethod
    def close(self) -> None: ...


class Broker(ABC):
    # True when messages never leave the publishing process.
    in_process = False

    @abstractmethod
    def send(self, channel: str, key: Optional[str], value: bytes) -> None:
        """Hand a message to the transport; returns without waiting for delivery."""

    @abstractmethod
    def consumer(self, channel: str, group_id: str, member: int = 0, members: int = 1) -> ChannelConsumer: ...

    def flush(self, timeout: float = 10.0) -> int:
        """Block until buffered messages are delivered; returns how many remain."""
        return 0

    def close(self) -> None:
        self.flush()
