import multiprocessing
import os

# Thread-per-request: gthread workers; listeners run in the separate worker process.
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(
    os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1))
)
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
raw_env = [f"EVENT_LISTENERS_AUTOSTART={os.environ.get('EVENT_LISTENERS_AUTOSTART', 'false')}"]


def worker_exit(server, worker):
    """Drain buffered events before a worker goes away."""
    from quorahub.core.events.publisher import event_publisher

    event_publisher.broker.flush(5.0)
