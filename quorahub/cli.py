"""Event infrastructure commands.

Usage:
    flask events create-topics       # create Kafka topics from the channel catalog
    flask events listen              # run listener containers in the foreground
    flask events listen -c answer-events -c question-events
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import AppGroup

events_cli = AppGroup("events", help="Domain event channels and listeners.")


@events_cli.command("create-topics")
@click.option("--timeout", type=float, default=10.0, show_default=True, help="Admin request timeout in seconds")
def create_topics_command(timeout: float):
    """Create missing channel topics on the configured Kafka cluster."""
    from quorahub.platform.broker.kafka import KafkaBroker

    broker = current_app.extensions.get("event_broker")
    if not isinstance(broker, KafkaBroker):
        raise click.ClickException("EVENT_BROKER is not 'kafka'; nothing to create")
    results = broker.ensure_topics(timeout=timeout)
    failed = [name for name, ok in results.items() if not ok]
    for name, ok in sorted(results.items()):
        click.echo(f"  {'✓' if ok else '✗'} {name}")
    if failed:
        raise click.ClickException(f"{len(failed)} topic(s) could not be created")


@events_cli.command("listen")
@click.option("--channel", "-c", "channels", multiple=True, help="Channel to listen on (repeatable; default all)")
@click.option("--concurrency", type=int, default=None, help="Listener threads per channel")
def listen_command(channels: tuple, concurrency: int | None):
    """Run listener containers until interrupted."""
    from quorahub.platform.worker.config import ListenerConfig
    from quorahub.platform.worker.run import run_listeners

    cfg = ListenerConfig.from_config(current_app.config)
    if channels:
        cfg.channels = tuple(channels)
    if concurrency:
        cfg.concurrency = concurrency
    click.echo(f"Listening on {', '.join(cfg.channels)} as {cfg.group_id}")
    run_listeners(current_app._get_current_object(), cfg)


def register_commands(app) -> None:
    app.cli.add_command(events_cli)
