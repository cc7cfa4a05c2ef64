"""Listener containers: a fixed pool of polling threads per channel."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Union

from quorahub.platform.broker.base import Broker, ChannelConsumer, Message
from quorahub.platform.worker.config import ListenerConfig

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str, Union[str, bytes]], bool]


class ListenerContainer:
    """Runs ``concurrency`` members of ``group_id`` against one channel.

    Every polled message is handed to ``handler`` and then committed, whether
    or not the handler succeeded. A member thread only stops when the
    container is stopped.
    """

    def __init__(
        self,
        broker: Broker,
        channel: str,
        group_id: str,
        handler: MessageHandler,
        concurrency: int = 1,
        poll_timeout: float = 3.0,
        app=None,
    ) -> None:
        self.broker = broker
        self.channel = channel
        self.group_id = group_id
        self.handler = handler
        self.concurrency = max(concurrency, 1)
        self.poll_timeout = poll_timeout
        self.app = app
        self.processed = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> "ListenerContainer":
        if self._threads:
            return self
        self._stop.clear()
        for member in range(self.concurrency):
            consumer = self.broker.consumer(self.channel, self.group_id, member=member, members=self.concurrency)
            thread = threading.Thread(
                target=self._run,
                args=(consumer,),
                name=f"{self.channel}-listener-{member}",
                daemon=True,
            )
            self._threads.append(thread)
            thread.start()
        logger.info("Started %s listener(s) on %s (group=%s)", self.concurrency, self.channel, self.group_id)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout if timeout is not None else self.poll_timeout + 5)
        self._threads = []
        logger.info("Stopped listeners on %s", self.channel)

    def _run(self, consumer: ChannelConsumer) -> None:
        try:
            while not self._stop.is_set():
                try:
                    message = consumer.poll(self.poll_timeout)
                except Exception:
                    logger.exception("Poll failed on %s", self.channel)
                    self._stop.wait(self.poll_timeout)
                    continue
                if message is None:
                    continue
                self._dispatch(message)
                try:
                    consumer.commit(message)
                except Exception:
                    logger.exception("Offset commit failed on %s[%s]@%s", self.channel, message.partition, message.offset)
        finally:
            consumer.close()

    def _dispatch(self, message: Message) -> None:
        try:
            if self.app is not None:
                with self.app.app_context():
                    self.handler(message.channel, message.value)
            else:
                self.handler(message.channel, message.value)
        except Exception:
            logger.exception("Listener on %s failed for offset %s", self.channel, message.offset)
        with self._lock:
            self.processed += 1


def start_listeners(app, broker: Broker, handler: MessageHandler, config: ListenerConfig) -> List[ListenerContainer]:
    containers = [
        ListenerContainer(
            broker,
            channel,
            config.group_id,
            handler,
            concurrency=config.concurrency,
            poll_timeout=config.poll_timeout,
            app=app,
        ).start()
        for channel in config.channels
    ]
    app.extensions["event_listeners"] = containers
    return containers


def stop_listeners(containers: List[ListenerContainer]) -> None:
    for container in containers:
        container.stop()
