from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from quorahub.core.auth.password import verify_password
from quorahub.core.events.event_types import AUDIT_LOG_EVENTS, AUDIT_UPDATE, RESOURCE_USER
from quorahub.domains.answers.services import create_answer
from quorahub.domains.comments.services import create_comment
from quorahub.domains.questions.services import create_question
from quorahub.extensions import db

from conftest import DEFAULT_PASSWORD, bearer


class TestPasswordChange:
    def test_owner_changes_password(self, client, user, broker):
        resp = client.put(
            f"/api/v1/users/{user.id}/password",
            json={"oldPassword": DEFAULT_PASSWORD, "newPassword": "a-brand-new-secret"},
            headers=bearer(user),
        )

        assert resp.status_code == 200
        db.session.refresh(user)
        assert verify_password("a-brand-new-secret", user.password_hash)
        audit = broker.payloads(AUDIT_LOG_EVENTS)[-1]
        assert (audit["action"], audit["resourceType"], audit["resourceId"]) == (AUDIT_UPDATE, RESOURCE_USER, user.id)

        login = client.post("/api/v1/auth/login", json={"username_or_email": "alice", "password": "a-brand-new-secret"})
        assert login.status_code == 200

    def test_wrong_old_password(self, client, user):
        resp = client.put(
            f"/api/v1/users/{user.id}/password",
            json={"old_password": "not-it", "new_password": "a-brand-new-secret"},
            headers=bearer(user),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "invalid_password"

    def test_new_password_too_short(self, client, user):
        resp = client.put(
            f"/api/v1/users/{user.id}/password",
            json={"old_password": DEFAULT_PASSWORD, "new_password": "short"},
            headers=bearer(user),
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"

    def test_only_the_owner(self, client, user, admin):
        payload = {"old_password": DEFAULT_PASSWORD, "new_password": "a-brand-new-secret"}
        assert client.put(f"/api/v1/users/{user.id}/password", json=payload).status_code == 401
        assert client.put(f"/api/v1/users/{user.id}/password", json=payload, headers=bearer(admin)).status_code == 403


class TestLookup:
    def test_by_username(self, client, user, other_user):
        resp = client.get("/api/v1/users/search/username/alice", headers=bearer(other_user))
        assert resp.status_code == 200
        assert resp.get_json()["user"]["id"] == user.id

    def test_by_email_is_case_insensitive(self, client, user, other_user):
        resp = client.get("/api/v1/users/search/email/ALICE@example.com", headers=bearer(other_user))
        assert resp.status_code == 200
        assert resp.get_json()["user"]["username"] == "alice"

    def test_unknown(self, client, user):
        assert client.get("/api/v1/users/search/username/ghost", headers=bearer(user)).status_code == 404
        assert client.get("/api/v1/users/search/email/ghost@example.com", headers=bearer(user)).status_code == 404

    def test_requires_login(self, client, user):
        assert client.get("/api/v1/users/search/username/alice").status_code == 401


class TestStatistics:
    @pytest.fixture
    def activity(self, user, other_user):
        first = create_question(user.id, title="First question", content="...")
        create_question(user.id, title="Second question", content="...")
        answer = create_answer(user.id, question_id=first.id, content="self answer")
        create_answer(other_user.id, question_id=first.id, content="other answer")
        for text in ("one", "two", "three"):
            create_comment(user.id, answer_id=answer.id, content=text)

    def test_all_counts(self, client, user, activity):
        resp = client.get(f"/api/v1/users/{user.id}/statistics", headers=bearer(user))
        assert resp.get_json()["statistics"] == {"questions": 2, "answers": 1, "comments": 3}

    @pytest.mark.parametrize("kind, expected", [("questions", 2), ("answers", 1), ("comments", 3)])
    def test_single_count(self, client, user, activity, kind, expected):
        resp = client.get(f"/api/v1/users/{user.id}/statistics/{kind}", headers=bearer(user))
        assert resp.status_code == 200
        assert resp.get_json()[kind] == expected

    def test_unknown_kind_and_user(self, client, user):
        assert client.get(f"/api/v1/users/{user.id}/statistics/likes", headers=bearer(user)).status_code == 404
        assert client.get("/api/v1/users/9999/statistics", headers=bearer(user)).status_code == 404
