import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quorahub import create_app
from quorahub.core.auth.password import hash_password
from quorahub.core.auth.tokens import token_provider
from quorahub.core.events.consumer import event_consumer
from quorahub.core.events.event_types import ALL_CHANNELS
from quorahub.core.users.models import ROLE_ADMIN, ROLE_MODERATOR, ROLE_USER, User
from quorahub.extensions import db

DEFAULT_PASSWORD = "correct-horse-battery"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")
    config.addinivalue_line("markers", "smoke: Quick smoke tests for CI")


@pytest.fixture()
def app():
    """Per-test app on a fresh in-memory database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def broker(app):
    return app.extensions["event_broker"]


def make_user(username: str, role: str = ROLE_USER, *, password: str = DEFAULT_PASSWORD, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
    )
    db.session.add(user)
    db.session.commit()
    return user


def bearer(user: User) -> dict:
    token = token_provider.generate_access_token(user.id, user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(app):
    return make_user("alice")


@pytest.fixture()
def other_user(app):
    return make_user("bob")


@pytest.fixture()
def moderator(app):
    return make_user("mod", ROLE_MODERATOR)


@pytest.fixture()
def admin(app):
    return make_user("root", ROLE_ADMIN)


@pytest.fixture()
def auth_headers(user):
    return bearer(user)


@pytest.fixture()
def drain(broker):
    """Run pending broker messages through the event consumer until every channel is quiet.

    Handlers publish follow-up messages (notifications), so channels are swept
    repeatedly. Returns how many messages were handled.
    """
    consumers = {}

    def _drain(channels=ALL_CHANNELS) -> int:
        handled = 0
        progressed = True
        while progressed:
            progressed = False
            for channel in channels:
                consumer = consumers.setdefault(channel, broker.consumer(channel, "test-drain"))
                message = consumer.poll(0)
                while message is not None:
                    event_consumer.handle(message.channel, message.value)
                    consumer.commit(message)
                    handled += 1
                    progressed = True
                    message = consumer.poll(0)
        return handled

    return _drain
