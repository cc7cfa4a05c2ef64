from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from quorahub.core.audit.models import AuditLogEntry
from quorahub.core.events.event_types import (
    ANSWER_DELETED,
    ANSWER_EVENTS,
    AUDIT_CREATE,
    AUDIT_DELETE,
    AUDIT_LOG_EVENTS,
    ENGAGEMENT_EVENTS,
    QUESTION_DELETED,
    QUESTION_EVENTS,
    RESOURCE_TAG,
    RESOURCE_USER,
    USER_EVENTS,
    USER_FOLLOWED_TAG,
    USER_PROFILE_UPDATED,
    USER_UNFOLLOWED_TAG,
)
from quorahub.core.search.models import SearchDocument
from quorahub.domains.answers.services import create_answer
from quorahub.domains.questions.models.question_models import Question
from quorahub.domains.questions.services import create_question, like_question
from quorahub.domains.tags.models.tag_models import Tag
from quorahub.domains.tags.services import create_tag
from quorahub.extensions import db

from conftest import bearer


@pytest.fixture
def tag(admin):
    return create_tag(name="Databases", description="SQL and friends", acting_user_id=admin.id)


def test_tag_names_are_normalized(tag):
    assert tag.name == "databases"


def test_duplicate_tag_conflicts(client, tag, admin):
    resp = client.post("/api/v1/tags", json={"name": " DATABASES "}, headers=bearer(admin))
    assert resp.status_code == 409


def test_tag_create_and_delete_are_audited(client, admin, broker, drain):
    resp = client.post("/api/v1/tags", json={"name": "go"}, headers=bearer(admin))
    tag_id = resp.get_json()["tag"]["id"]
    client.delete(f"/api/v1/tags/{tag_id}", headers=bearer(admin))

    actions = [(p["action"], p["resourceType"]) for p in broker.payloads(AUDIT_LOG_EVENTS)]
    assert actions == [(AUDIT_CREATE, RESOURCE_TAG), (AUDIT_DELETE, RESOURCE_TAG)]

    drain()
    assert AuditLogEntry.query.filter_by(resource_type=RESOURCE_TAG, resource_id=tag_id).count() == 2


def test_list_and_get_tags(client, tag):
    body = client.get("/api/v1/tags?search=data").get_json()
    assert [t["name"] for t in body["tags"]] == ["databases"]
    assert client.get(f"/api/v1/tags/{tag.id}").get_json()["tag"]["description"] == "SQL and friends"
    assert client.get("/api/v1/tags/999").status_code == 404


def test_follow_is_idempotent_and_published(client, tag, user, auth_headers, broker):
    broker.clear()

    first = client.post(f"/api/v1/users/me/tags/{tag.id}", headers=auth_headers).get_json()
    second = client.post(f"/api/v1/users/me/tags/{tag.id}", headers=auth_headers).get_json()

    assert first["changed"] is True
    assert second["changed"] is False
    assert second["tag"]["follower_count"] == 1
    payloads = broker.payloads(ENGAGEMENT_EVENTS)
    assert len(payloads) == 1
    assert payloads[0]["eventType"] == USER_FOLLOWED_TAG
    assert payloads[0]["tagId"] == tag.id
    assert payloads[0]["tagName"] == "databases"
    assert broker.messages(ENGAGEMENT_EVENTS)[0].key == str(user.id)


def test_unfollow(client, tag, auth_headers, broker):
    client.post(f"/api/v1/users/me/tags/{tag.id}", headers=auth_headers)
    body = client.delete(f"/api/v1/users/me/tags/{tag.id}", headers=auth_headers).get_json()

    assert body["changed"] is True
    assert body["tag"]["follower_count"] == 0
    assert [p["eventType"] for p in broker.payloads(ENGAGEMENT_EVENTS)] == [USER_FOLLOWED_TAG, USER_UNFOLLOWED_TAG]
    assert client.get("/api/v1/users/me/tags", headers=auth_headers).get_json()["tags"] == []


def test_follow_missing_tag_404(client, auth_headers):
    assert client.post("/api/v1/users/me/tags/321", headers=auth_headers).status_code == 404


def test_profile_update_publishes_user_event(client, user, auth_headers, broker):
    resp = client.patch(f"/api/v1/users/{user.id}", json={"first_name": "Alice", "bio": "Hi"}, headers=auth_headers)

    assert resp.status_code == 200
    payload = broker.payloads(USER_EVENTS)[0]
    assert payload["eventType"] == USER_PROFILE_UPDATED
    assert payload["userId"] == user.id


def test_profile_update_rejects_taken_email(client, user, other_user, auth_headers):
    resp = client.patch(f"/api/v1/users/{user.id}", json={"email": "BOB@example.com"}, headers=auth_headers)
    assert resp.status_code == 409


def test_profile_update_rejects_unknown_fields(client, user, auth_headers):
    resp = client.patch(f"/api/v1/users/{user.id}", json={"role": "ROLE_ADMIN"}, headers=auth_headers)
    assert resp.status_code == 400


def test_deleting_user_releases_follows(client, tag, other_user, admin, broker):
    client.post(f"/api/v1/users/me/tags/{tag.id}", headers=bearer(other_user))

    assert client.delete(f"/api/v1/users/{other_user.id}", headers=bearer(admin)).status_code == 200
    assert client.get(f"/api/v1/tags/{tag.id}").get_json()["tag"]["follower_count"] == 0
    last = broker.payloads(AUDIT_LOG_EVENTS)[-1]
    assert (last["action"], last["resourceType"], last["resourceId"]) == (AUDIT_DELETE, RESOURCE_USER, other_user.id)


def test_deleting_user_purges_authored_content(client, tag, user, other_user, admin, broker, drain):
    own = create_question(other_user.id, title="Ghost question", content="zzzghost body", tag_ids=[tag.id])
    elsewhere = create_question(user.id, title="Survivor", content="stays")
    create_answer(user.id, question_id=own.id, content="answer under a doomed question")
    stray = create_answer(other_user.id, question_id=elsewhere.id, content="zzzghost answer")
    like_question(elsewhere.id, other_user.id)
    drain()
    assert client.get("/api/v1/search?q=zzzghost").get_json()["total"] == 2

    assert client.delete(f"/api/v1/users/{other_user.id}", headers=bearer(admin)).status_code == 200

    question_events = [(p["eventType"], p["questionId"]) for p in broker.payloads(QUESTION_EVENTS)]
    assert (QUESTION_DELETED, own.id) in question_events
    answer_events = [(p["eventType"], p["answerId"]) for p in broker.payloads(ANSWER_EVENTS)]
    assert (ANSWER_DELETED, stray.id) in answer_events

    drain()
    assert client.get("/api/v1/search?q=zzzghost").get_json()["total"] == 0
    assert SearchDocument.query.filter_by(question_id=own.id).count() == 0

    refreshed = db.session.get(Tag, tag.id)
    assert refreshed.question_count == len(refreshed.questions) == 0
    survivor = db.session.get(Question, elsewhere.id)
    assert survivor.like_count == 0
    assert survivor.answer_count == 0
