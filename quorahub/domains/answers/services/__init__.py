"""Answer services; every mutation lands on answer-events after commit."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from quorahub.core.events.event_types import (
    ANSWER_DELETED,
    ANSWER_LIKED,
    ANSWER_UNLIKED,
    ANSWER_UNMARKED_ACCEPTED,
    ANSWER_UPDATED,
)
from quorahub.core.events.publisher import event_publisher
from quorahub.core.users.models import User
from quorahub.core.utils.pagination import paginate
from quorahub.core.utils.persistence import delete_and_commit
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.questions.models.question_models import Question
from quorahub.extensions import db


def create_answer(author_id: int, *, question_id: int, content: str) -> Answer:
    question = db.session.get(Question, question_id)
    author = db.session.get(User, author_id)
    if not question or not author:
        raise ValueError("not_found")
    answer = Answer(content=content.strip(), question=question, author=author)
    db.session.add(answer)
    db.session.commit()
    event_publisher.publish_answer_created(answer.id, question.id, author_id)
    return answer


def list_answers(question_id: int, *, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    if not db.session.get(Question, question_id):
        raise ValueError("not_found")
    query = Answer.query.filter(Answer.question_id == question_id).order_by(
        Answer.is_accepted.desc(), Answer.like_count.desc(), Answer.created_at.asc(), Answer.id.asc()
    )
    return paginate(query, page=page, per_page=per_page)


def get_answer(answer_id: int) -> Optional[Answer]:
    return db.session.get(Answer, answer_id)


def update_answer(answer_id: int, acting_user_id: int, *, content: str) -> Answer:
    answer = get_answer(answer_id)
    if not answer:
        raise ValueError("not_found")
    if answer.author_id != acting_user_id:
        raise ValueError("forbidden")
    answer.content = content.strip()
    db.session.commit()
    event_publisher.publish_answer_event(ANSWER_UPDATED, answer.id, answer.question_id, acting_user_id)
    return answer


def delete_answer(answer_id: int, acting_user_id: int, *, moderator: bool = False) -> bool:
    answer = get_answer(answer_id)
    if not answer:
        return False
    if answer.author_id != acting_user_id and not moderator:
        raise ValueError("forbidden")
    question_id = answer.question_id
    delete_and_commit(answer)
    event_publisher.publish_answer_event(ANSWER_DELETED, answer_id, question_id, acting_user_id)
    return True


def accept_answer(answer_id: int, acting_user_id: int) -> Tuple[Answer, bool]:
    """Mark ``answer_id`` accepted; any previously accepted answer is cleared."""
    answer = get_answer(answer_id)
    if not answer:
        raise ValueError("not_found")
    if answer.question.author_id != acting_user_id:
        raise ValueError("forbidden")
    if answer.is_accepted:
        return answer, False
    Answer.query.filter(
        Answer.question_id == answer.question_id, Answer.is_accepted.is_(True)
    ).update({Answer.is_accepted: False}, synchronize_session="fetch")
    answer.is_accepted = True
    db.session.commit()
    event_publisher.publish_answer_accepted(answer.id, answer.question_id, acting_user_id)
    return answer, True


def unaccept_answer(answer_id: int, acting_user_id: int) -> Tuple[Answer, bool]:
    answer = get_answer(answer_id)
    if not answer:
        raise ValueError("not_found")
    if answer.question.author_id != acting_user_id:
        raise ValueError("forbidden")
    if not answer.is_accepted:
        return answer, False
    answer.is_accepted = False
    db.session.commit()
    event_publisher.publish_answer_event(ANSWER_UNMARKED_ACCEPTED, answer.id, answer.question_id, acting_user_id)
    return answer, True


def like_answer(answer_id: int, user_id: int) -> Tuple[Answer, bool]:
    answer = get_answer(answer_id)
    user = db.session.get(User, user_id)
    if not answer or not user:
        raise ValueError("not_found")
    if user in answer.liked_by:
        return answer, False
    answer.liked_by.append(user)
    answer.like_count = (answer.like_count or 0) + 1
    db.session.commit()
    event_publisher.publish_answer_event(ANSWER_LIKED, answer.id, answer.question_id, user_id)
    return answer, True


def unlike_answer(answer_id: int, user_id: int) -> Tuple[Answer, bool]:
    answer = get_answer(answer_id)
    user = db.session.get(User, user_id)
    if not answer or not user:
        raise ValueError("not_found")
    if user not in answer.liked_by:
        return answer, False
    answer.liked_by.remove(user)
    answer.like_count = max((answer.like_count or 0) - 1, 0)
    db.session.commit()
    event_publisher.publish_answer_event(ANSWER_UNLIKED, answer.id, answer.question_id, user_id)
    return answer, True
