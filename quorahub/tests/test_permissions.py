from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from quorahub.domains.questions.services import create_question
from quorahub.domains.tags.services import create_tag

from conftest import bearer


@pytest.fixture
def question(user):
    return create_question(user.id, title="Why is the sky blue?", content="Rayleigh?")


def test_delete_question_requires_authentication(client, question):
    resp = client.delete(f"/api/v1/questions/{question.id}")
    assert resp.status_code == 401


def test_delete_question_forbidden_for_plain_user(client, question, user):
    resp = client.delete(f"/api/v1/questions/{question.id}", headers=bearer(user))
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"


@pytest.mark.parametrize("role_fixture", ["moderator", "admin"])
def test_delete_question_allowed_for_staff(request, client, question, role_fixture):
    staff = request.getfixturevalue(role_fixture)
    resp = client.delete(f"/api/v1/questions/{question.id}", headers=bearer(staff))
    assert resp.status_code == 200


def test_create_tag_admin_only(client, user, moderator, admin):
    payload = {"name": "Python"}
    assert client.post("/api/v1/tags", json=payload).status_code == 401
    assert client.post("/api/v1/tags", json=payload, headers=bearer(user)).status_code == 403
    assert client.post("/api/v1/tags", json=payload, headers=bearer(moderator)).status_code == 403

    resp = client.post("/api/v1/tags", json=payload, headers=bearer(admin))
    assert resp.status_code == 201
    assert resp.get_json()["tag"]["name"] == "python"


def test_delete_tag_admin_only(client, user, admin):
    tag = create_tag(name="rust", acting_user_id=admin.id)
    assert client.delete(f"/api/v1/tags/{tag.id}", headers=bearer(user)).status_code == 403
    assert client.delete(f"/api/v1/tags/{tag.id}", headers=bearer(admin)).status_code == 200


def test_delete_user_admin_only(client, user, other_user, admin):
    assert client.delete(f"/api/v1/users/{other_user.id}", headers=bearer(user)).status_code == 403
    assert client.delete(f"/api/v1/users/{other_user.id}", headers=bearer(admin)).status_code == 200
    assert client.get(f"/api/v1/users/{other_user.id}", headers=bearer(admin)).status_code == 404


def test_profile_update_self_or_admin(client, user, other_user, admin):
    resp = client.patch(f"/api/v1/users/{other_user.id}", json={"bio": "hijacked"}, headers=bearer(user))
    assert resp.status_code == 403

    resp = client.patch(f"/api/v1/users/{user.id}", json={"bio": "hello"}, headers=bearer(user))
    assert resp.status_code == 200
    assert resp.get_json()["user"]["bio"] == "hello"

    resp = client.patch(f"/api/v1/users/{other_user.id}", json={"bio": "moderated"}, headers=bearer(admin))
    assert resp.status_code == 200


def test_users_listing_requires_login(client, user):
    assert client.get("/api/v1/users").status_code == 401
    assert client.get("/api/v1/users", headers=bearer(user)).status_code == 200
