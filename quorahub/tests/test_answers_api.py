"""Tests for the answers API and answer-events output."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from quorahub.core.events.event_types import (
    ANSWER_CREATED,
    ANSWER_DELETED,
    ANSWER_EVENTS,
    ANSWER_LIKED,
    ANSWER_MARKED_ACCEPTED,
    ANSWER_UNLIKED,
    ANSWER_UNMARKED_ACCEPTED,
    ANSWER_UPDATED,
    NOTIFY_ANSWER_ACCEPTED,
    NOTIFY_ANSWER_LIKED,
    NOTIFY_NEW_ANSWER,
)
from quorahub.core.notifications.models import Notification
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.answers.services import create_answer
from quorahub.domains.questions.services import create_question
from quorahub.extensions import db

from conftest import bearer


@pytest.fixture
def question(user):
    return create_question(user.id, title="Tabs or spaces?", content="Settle it.")


def test_posting_answer_publishes_exactly_one_answer_created(client, question, user, other_user, broker):
    broker.clear()

    resp = client.post(
        "/api/v1/answers",
        json={"questionId": question.id, "content": "Spaces, four of them."},
        headers=bearer(other_user),
    )

    assert resp.status_code == 201
    answer_id = resp.get_json()["answer"]["id"]
    messages = broker.messages(ANSWER_EVENTS)
    assert len(messages) == 1
    assert messages[0].key == str(answer_id)
    payload = broker.payloads(ANSWER_EVENTS)[0]
    assert payload["eventType"] == ANSWER_CREATED
    assert payload["answerId"] == answer_id
    assert payload["questionId"] == question.id
    assert payload["userId"] == other_user.id


def test_answer_to_missing_question_is_404(client, auth_headers, broker):
    resp = client.post("/api/v1/answers", json={"question_id": 999, "content": "hello"}, headers=auth_headers)
    assert resp.status_code == 404
    assert broker.messages(ANSWER_EVENTS) == []


def test_answer_requires_login(client, question):
    resp = client.post("/api/v1/answers", json={"question_id": question.id, "content": "anon"})
    assert resp.status_code == 401


def test_new_answer_notifies_question_author(client, question, user, other_user, drain):
    client.post("/api/v1/answers", json={"question_id": question.id, "content": "Tabs."}, headers=bearer(other_user))
    drain()

    notes = Notification.query.filter_by(user_id=user.id).all()
    assert [n.notification_type for n in notes] == [NOTIFY_NEW_ANSWER]
    assert "Tabs or spaces?" in notes[0].message


def test_self_answer_sends_no_notification(client, question, user, drain):
    client.post("/api/v1/answers", json={"question_id": question.id, "content": "Answering myself."}, headers=bearer(user))
    drain()
    assert Notification.query.count() == 0


def test_list_orders_accepted_first(client, question, user, other_user, moderator):
    first = create_answer(other_user.id, question_id=question.id, content="first")
    second = create_answer(moderator.id, question_id=question.id, content="second")
    client.post(f"/api/v1/answers/{second.id}/accept", headers=bearer(user))

    body = client.get(f"/api/v1/answers?question_id={question.id}").get_json()

    assert [a["id"] for a in body["answers"]] == [second.id, first.id]
    assert body["answers"][0]["is_accepted"] is True


def test_list_requires_question_id(client):
    resp = client.get("/api/v1/answers")
    assert resp.status_code == 400


def test_update_and_delete_by_author(client, question, other_user, broker):
    answer = create_answer(other_user.id, question_id=question.id, content="draft")
    broker.clear()
    headers = bearer(other_user)

    resp = client.patch(f"/api/v1/answers/{answer.id}", json={"content": "final"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["answer"]["content"] == "final"

    assert client.delete(f"/api/v1/answers/{answer.id}", headers=headers).status_code == 200
    assert [p["eventType"] for p in broker.payloads(ANSWER_EVENTS)] == [ANSWER_UPDATED, ANSWER_DELETED]
    assert db.session.get(Answer, answer.id) is None


def test_update_by_other_user_forbidden(client, question, user, other_user):
    answer = create_answer(other_user.id, question_id=question.id, content="mine")
    resp = client.patch(f"/api/v1/answers/{answer.id}", json={"content": "yours"}, headers=bearer(user))
    assert resp.status_code == 403


def test_moderator_can_delete_any_answer(client, question, other_user, moderator):
    answer = create_answer(other_user.id, question_id=question.id, content="off-topic")
    assert client.delete(f"/api/v1/answers/{answer.id}", headers=bearer(moderator)).status_code == 200


class TestAcceptance:
    def test_only_question_author_may_accept(self, client, question, other_user):
        answer = create_answer(other_user.id, question_id=question.id, content="pick me")
        resp = client.post(f"/api/v1/answers/{answer.id}/accept", headers=bearer(other_user))
        assert resp.status_code == 403

    def test_accepting_moves_the_mark(self, client, question, user, other_user, moderator, broker):
        a1 = create_answer(other_user.id, question_id=question.id, content="one")
        a2 = create_answer(moderator.id, question_id=question.id, content="two")
        broker.clear()
        headers = bearer(user)

        client.post(f"/api/v1/answers/{a1.id}/accept", headers=headers)
        resp = client.post(f"/api/v1/answers/{a2.id}/accept", headers=headers)

        assert resp.get_json()["answer"]["is_accepted"] is True
        assert client.get(f"/api/v1/answers/{a1.id}").get_json()["answer"]["is_accepted"] is False
        payloads = broker.payloads(ANSWER_EVENTS)
        assert [(p["eventType"], p["answerId"]) for p in payloads] == [
            (ANSWER_MARKED_ACCEPTED, a1.id),
            (ANSWER_MARKED_ACCEPTED, a2.id),
        ]
        assert all(p["userId"] == user.id for p in payloads)

    def test_accept_twice_is_a_noop(self, client, question, user, other_user, broker):
        answer = create_answer(other_user.id, question_id=question.id, content="once")
        broker.clear()
        client.post(f"/api/v1/answers/{answer.id}/accept", headers=bearer(user))
        body = client.post(f"/api/v1/answers/{answer.id}/accept", headers=bearer(user)).get_json()

        assert body["changed"] is False
        assert len(broker.messages(ANSWER_EVENTS)) == 1

    def test_unaccept(self, client, question, user, other_user, broker):
        answer = create_answer(other_user.id, question_id=question.id, content="changed my mind")
        client.post(f"/api/v1/answers/{answer.id}/accept", headers=bearer(user))
        broker.clear()

        body = client.delete(f"/api/v1/answers/{answer.id}/accept", headers=bearer(user)).get_json()

        assert body["changed"] is True
        assert body["answer"]["is_accepted"] is False
        assert [p["eventType"] for p in broker.payloads(ANSWER_EVENTS)] == [ANSWER_UNMARKED_ACCEPTED]

    def test_accept_notifies_answer_author(self, client, question, user, other_user, drain):
        answer = create_answer(other_user.id, question_id=question.id, content="accepted soon")
        client.post(f"/api/v1/answers/{answer.id}/accept", headers=bearer(user))
        drain()

        types = [n.notification_type for n in Notification.query.filter_by(user_id=other_user.id)]
        assert types == [NOTIFY_ANSWER_ACCEPTED]


class TestAnswerLikes:
    def test_like_unlike_cycle(self, client, question, user, other_user, broker):
        answer = create_answer(other_user.id, question_id=question.id, content="likeable")
        broker.clear()
        headers = bearer(user)

        assert client.post(f"/api/v1/answers/{answer.id}/like", headers=headers).get_json()["like_count"] == 1
        assert client.post(f"/api/v1/answers/{answer.id}/like", headers=headers).get_json()["changed"] is False
        assert client.delete(f"/api/v1/answers/{answer.id}/like", headers=headers).get_json()["like_count"] == 0

        payloads = broker.payloads(ANSWER_EVENTS)
        assert [p["eventType"] for p in payloads] == [ANSWER_LIKED, ANSWER_UNLIKED]
        assert all(m.key == str(answer.id) for m in broker.messages(ANSWER_EVENTS))

    def test_like_notifies_answer_author(self, client, question, user, other_user, drain):
        answer = create_answer(other_user.id, question_id=question.id, content="nice")
        client.post(f"/api/v1/answers/{answer.id}/like", headers=bearer(user))
        drain()

        notes = Notification.query.filter_by(user_id=other_user.id, notification_type=NOTIFY_ANSWER_LIKED).all()
        assert len(notes) == 1
        assert notes[0].message == "alice liked your answer"
