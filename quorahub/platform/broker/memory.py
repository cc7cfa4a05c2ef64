"""In-process partitioned broker used for development and tests."""

from __future__ import annotations

import json
import threading
import time
import zlib
from itertools import count
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from quorahub.core.events.event_types import TOPICS, TopicSpec
from quorahub.platform.broker.base import Broker, ChannelConsumer, Message


class InMemoryBroker(Broker):
    """Per-channel partitioned logs with consumer-group offsets.

    Keys map to a stable partition so that messages sharing a key are read
    back in send order; nothing is promised across partitions.

    Logs are kept in memory and never compacted, so this transport is for
    development and tests only. ``clear()`` starts a new generation: live
    consumers rewind to the start of the emptied logs on their next poll.
    """

    in_process = True

    def __init__(self, topics: Optional[Mapping[str, TopicSpec]] = None) -> None:
        self._topics = dict(topics if topics is not None else TOPICS)
        self._logs: Dict[str, List[List[Message]]] = {}
        self._sent: Dict[str, List[Message]] = {}
        self._committed: Dict[Tuple[str, str, int], int] = {}
        self._round_robin = count()
        self._generation = 0
        self._cond = threading.Condition()

    def partition_count(self, channel: str) -> int:
        spec = self._topics.get(channel)
        return spec.partitions if spec else 1

    def partition_for(self, channel: str, key: Optional[str]) -> int:
        partitions = self.partition_count(channel)
        if key is None:
            return next(self._round_robin) % partitions
        return zlib.crc32(key.encode("utf-8")) % partitions

    def _partitions(self, channel: str) -> List[List[Message]]:
        if channel not in self._logs:
            self._logs[channel] = [[] for _ in range(self.partition_count(channel))]
        return self._logs[channel]

    def send(self, channel: str, key: Optional[str], value: bytes) -> None:
        with self._cond:
            partitions = self._partitions(channel)
            partition = self.partition_for(channel, key)
            message = Message(
                channel=channel,
                key=key,
                value=value,
                partition=partition,
                offset=len(partitions[partition]),
            )
            partitions[partition].append(message)
            self._sent.setdefault(channel, []).append(message)
            self._cond.notify_all()

    def consumer(self, channel: str, group_id: str, member: int = 0, members: int = 1) -> "InMemoryConsumer":
        assigned = [p for p in range(self.partition_count(channel)) if p % max(members, 1) == member]
        return InMemoryConsumer(self, channel, group_id, assigned)

    # --- inspection helpers ---

    def messages(self, channel: str) -> List[Message]:
        with self._cond:
            return list(self._sent.get(channel, []))

    def payloads(self, channel: str) -> List[dict]:
        return [json.loads(m.value) for m in self.messages(channel)]

    def committed_offset(self, group_id: str, channel: str, partition: int) -> int:
        with self._cond:
            return self._committed.get((group_id, channel, partition), 0)

    def clear(self) -> None:
        with self._cond:
            self._logs.clear()
            self._sent.clear()
            self._committed.clear()
            self._generation += 1
            self._cond.notify_all()

    # --- consumer plumbing ---

    def _read(self, consumer: "InMemoryConsumer", start: int, timeout: float) -> Optional[Message]:
        deadline = time.monotonic() + max(timeout, 0)
        partitions = consumer.partitions
        with self._cond:
            while True:
                if consumer._generation != self._generation:
                    consumer._positions = {p: 0 for p in partitions}
                    consumer._generation = self._generation
                positions = consumer._positions
                logs = self._partitions(consumer.channel)
                for idx in range(len(partitions)):
                    partition = partitions[(start + idx) % len(partitions)]
                    position = positions[partition]
                    if position < len(logs[partition]):
                        positions[partition] = position + 1
                        return logs[partition][position]
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._cond.wait(remaining)

    def _commit(self, group_id: str, message: Message) -> None:
        with self._cond:
            key = (group_id, message.channel, message.partition)
            self._committed[key] = max(self._committed.get(key, 0), message.offset + 1)


class InMemoryConsumer(ChannelConsumer):
    def __init__(self, broker: InMemoryBroker, channel: str, group_id: str, partitions: Sequence[int]) -> None:
        self.broker = broker
        self.channel = channel
        self.group_id = group_id
        self.partitions = list(partitions)
        with broker._cond:
            self._generation = broker._generation
            self._positions = {
                p: broker._committed.get((group_id, channel, p), 0) for p in self.partitions
            }
        self._turn = 0
        self._closed = False

    def poll(self, timeout: float) -> Optional[Message]:
        if self._closed or not self.partitions:
            time.sleep(max(timeout, 0))
            return None
        self._turn += 1
        return self.broker._read(self, self._turn, timeout)

    def commit(self, message: Message) -> None:
        self.broker._commit(self.group_id, message)

    def close(self) -> None:
        self._closed = True
