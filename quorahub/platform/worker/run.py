"""CLI entrypoint to run the event listener worker."""

from __future__ import annotations

import logging
import os
import time
from typing import Optional

from quorahub.platform.worker.config import ListenerConfig
from quorahub.platform.worker.listener import start_listeners, stop_listeners

logger = logging.getLogger(__name__)


def run_listeners(app, config: Optional[ListenerConfig] = None) -> None:
    """Start listener containers for every configured channel and block until interrupted."""
    from quorahub.core.events.consumer import event_consumer

    cfg = config or ListenerConfig.from_config(app.config)
    broker = app.extensions["event_broker"]
    logger.info(
        "Starting event listeners (group=%s, concurrency=%s, poll_timeout=%ss, channels=%s)",
        cfg.group_id,
        cfg.concurrency,
        cfg.poll_timeout,
        ",".join(cfg.channels),
    )
    containers = app.extensions.get("event_listeners")
    if broker.in_process and not containers:
        logger.warning(
            "EVENT_BROKER is %r; this worker only sees events published in its own process. "
            "Set EVENT_BROKER=kafka or use EVENT_LISTENERS_AUTOSTART in the web process.",
            app.config.get("EVENT_BROKER", "memory"),
        )
    if containers:
        logger.info("Listeners already running in-process; attaching")
    else:
        containers = start_listeners(app, broker, event_consumer.handle, cfg)
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Listeners stopped by user")
    finally:
        stop_listeners(containers)
        broker.close()


def main() -> None:
    logging.basicConfig(level=os.environ.get("WORKER_LOGLEVEL", "INFO"))
    from quorahub import create_app

    env = os.environ.get("APP_ENV", "development")
    app = create_app(env, start_listeners=False)
    if app.extensions["event_broker"].in_process:
        logger.error("Standalone worker needs a shared broker; EVENT_BROKER=%s", app.config.get("EVENT_BROKER"))
        raise SystemExit(2)
    run_listeners(app, ListenerConfig.from_env())


if __name__ == "__main__":
    main()
