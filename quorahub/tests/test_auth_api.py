from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from quorahub.core.auth.tokens import token_provider
from quorahub.core.events.event_types import NOTIFY_WELCOME, USER_EVENTS, USER_SIGNED_UP
from quorahub.core.notifications.models import Notification
from quorahub.core.users.models import ROLE_USER, User

from conftest import DEFAULT_PASSWORD


def _register(client, **overrides):
    payload = {
        "username": "carol",
        "email": "Carol@Example.com",
        "password": "s3cret-password",
        "first_name": "Carol",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


def test_register_creates_user_and_publishes_signup(client, broker):
    resp = _register(client)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["ok"] is True
    assert body["user"]["email"] == "carol@example.com"
    assert body["user"]["role"] == ROLE_USER

    user = User.query.filter_by(username="carol").one()
    assert user.password_hash != "s3cret-password"

    messages = broker.messages(USER_EVENTS)
    assert len(messages) == 1
    assert messages[0].key == str(user.id)
    payload = broker.payloads(USER_EVENTS)[0]
    assert payload["eventType"] == USER_SIGNED_UP
    assert payload["userId"] == user.id
    assert payload["username"] == "carol"
    assert "timestamp" in payload


def test_signup_listener_sends_welcome(client, drain):
    _register(client)
    drain()

    user = User.query.filter_by(username="carol").one()
    notes = Notification.query.filter_by(user_id=user.id).all()
    assert [n.notification_type for n in notes] == [NOTIFY_WELCOME]


def test_register_rejects_taken_username(client, user):
    resp = _register(client, username="alice")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "username_taken"


def test_register_rejects_taken_email_case_insensitively(client, user):
    resp = _register(client, email="ALICE@example.com")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "email_taken"


def test_register_validation_error(client):
    resp = _register(client, password="short", username="x")
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "validation_error"
    assert {tuple(d["loc"]) for d in body["details"]} >= {("password",), ("username",)}


def test_login_with_username_returns_token_pair(client, user):
    resp = client.post("/api/v1/auth/login", json={"username_or_email": "alice", "password": DEFAULT_PASSWORD})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["token_type"] == "Bearer"
    assert body["expires_in"] == 24 * 60 * 60
    assert token_provider.extract_subject(body["access_token"]) == user.id
    assert token_provider.extract_username(body["access_token"]) == "alice"
    assert token_provider.is_refresh_token(body["refresh_token"])


def test_login_with_email_alias(client, user):
    resp = client.post("/api/v1/auth/login", json={"usernameOrEmail": "ALICE@example.com", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200


def test_login_wrong_password(client, user):
    resp = client.post("/api/v1/auth/login", json={"username_or_email": "alice", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_credentials"


def test_login_unknown_user(client):
    resp = client.post("/api/v1/auth/login", json={"username_or_email": "nobody", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 401


def test_refresh_issues_new_pair(client, user):
    refresh = token_provider.generate_refresh_token(user.id)
    resp = client.post("/api/v1/auth/refresh", json={"refreshToken": refresh})

    assert resp.status_code == 200
    body = resp.get_json()
    assert token_provider.validate(body["access_token"])
    assert not token_provider.is_refresh_token(body["access_token"])
    assert body["user"]["id"] == user.id


def test_login_and_refresh_share_token_response_shape(client, user):
    login = client.post("/api/v1/auth/login", json={"username_or_email": "alice", "password": DEFAULT_PASSWORD})
    refresh = client.post("/api/v1/auth/refresh", json={"refresh_token": login.get_json()["refresh_token"]})

    expected = {"ok", "access_token", "refresh_token", "token_type", "expires_in", "user"}
    for resp in (login, refresh):
        body = resp.get_json()
        assert set(body) == expected
        assert (body["token_type"], body["expires_in"]) == ("Bearer", 86400)


def test_refresh_rejects_access_token(client, user):
    access = token_provider.generate_access_token(user.id, user.username)
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": access})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "invalid_token"


def test_refresh_rejects_garbage(client):
    resp = client.post("/api/v1/auth/refresh", json={"refresh_token": "abc.def"})
    assert resp.status_code == 401


def test_logout_is_stateless(client, user, auth_headers):
    assert client.post("/api/v1/auth/logout", headers=auth_headers).status_code == 200
    # The token keeps working until it expires.
    assert client.get("/api/v1/auth/me", headers=auth_headers).status_code == 200
