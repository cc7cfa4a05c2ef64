"""Application configuration for QuoraHub."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()

_DEFAULT_JWT_SECRET = (
    "change-me-quorahub-jwt-signing-key-use-at-least-64-bytes-for-hs512-0123456789"
)


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _engine_options_from_uri(uri: str) -> dict:
    url = make_url(uri)
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/quorahub.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)

    # Bearer tokens only; no server-side session state.
    SESSION_PROTECTION = None
    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "10"))

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", _DEFAULT_JWT_SECRET)
    JWT_ALGORITHM = "HS512"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_ACCESS_HOURS", "24")))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=int(os.environ.get("JWT_REFRESH_DAYS", "7")))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(1024 * 1024)))

    # Event fan-out
    EVENT_BROKER = os.environ.get("EVENT_BROKER", "memory")
    KAFKA_BOOTSTRAP_SERVERS = os.environ.get("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092")
    KAFKA_CLIENT_ID = os.environ.get("KAFKA_CLIENT_ID", "quorahub")
    KAFKA_ACKS = os.environ.get("KAFKA_ACKS", "all")
    KAFKA_RETRIES = int(os.environ.get("KAFKA_RETRIES", "3"))
    KAFKA_LINGER_MS = int(os.environ.get("KAFKA_LINGER_MS", "10"))
    KAFKA_BATCH_SIZE = int(os.environ.get("KAFKA_BATCH_SIZE", "32768"))
    KAFKA_COMPRESSION_TYPE = os.environ.get("KAFKA_COMPRESSION_TYPE", "snappy")
    EVENT_CONSUMER_GROUP = os.environ.get("EVENT_CONSUMER_GROUP", "quora-app-group")
    EVENT_LISTENER_CONCURRENCY = int(os.environ.get("EVENT_LISTENER_CONCURRENCY", "3"))
    EVENT_POLL_TIMEOUT_SECONDS = float(os.environ.get("EVENT_POLL_TIMEOUT_SECONDS", "3"))
    EVENT_LISTENERS_AUTOSTART = _flag("EVENT_LISTENERS_AUTOSTART", "false")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"
    # In-process listeners so side effects are visible without a separate worker.
    EVENT_LISTENERS_AUTOSTART = _flag("EVENT_LISTENERS_AUTOSTART", "true")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    RATELIMIT_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    EVENT_BROKER = "memory"
    EVENT_LISTENERS_AUTOSTART = False
    JWT_SECRET_KEY = "testing-quorahub-signing-key-0123456789abcdefghijklmnopqrstuvwxyz-ABCDEFGHIJ"


class ProductionConfig(BaseConfig):
    ENV = "production"
    EVENT_BROKER = os.environ.get("EVENT_BROKER", "kafka")


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
