"""Question services.

Each mutation commits and then publishes one event on question-events (or
engagement-events for likes). Publishing is best effort: if the broker
hand-off fails the change stays committed and the event is lost.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import selectinload

from quorahub.core.events.event_types import (
    QUESTION_CREATED,
    QUESTION_DELETED,
    QUESTION_EDITED,
    QUESTION_LIKED,
    QUESTION_UNLIKED,
)
from quorahub.core.events.publisher import event_publisher
from quorahub.core.users.models import User
from quorahub.core.utils.pagination import paginate
from quorahub.core.utils.persistence import delete_and_commit
from quorahub.domains.questions.models.question_models import Question, question_tags
from quorahub.domains.tags.models.tag_models import Tag
from quorahub.extensions import db


def _load_tags(tag_ids: Sequence[int]) -> List[Tag]:
    if not tag_ids:
        return []
    tags = Tag.query.filter(Tag.id.in_(tag_ids)).all()
    if len(tags) != len(set(tag_ids)):
        raise ValueError("invalid_tag")
    return tags


def _set_tags(question: Question, tags: List[Tag]) -> None:
    old = {t.id for t in question.tags}
    new = {t.id for t in tags}
    for tag in question.tags:
        if tag.id not in new:
            tag.question_count = max((tag.question_count or 0) - 1, 0)
    for tag in tags:
        if tag.id not in old:
            tag.question_count = (tag.question_count or 0) + 1
    question.tags = list(tags)


def create_question(author_id: int, *, title: str, content: str, tag_ids: Sequence[int] = ()) -> Question:
    author = db.session.get(User, author_id)
    if not author:
        raise ValueError("not_found")
    tags = _load_tags(tag_ids)
    question = Question(title=title.strip(), content=content.strip(), author=author)
    _set_tags(question, tags)
    db.session.add(question)
    db.session.commit()
    event_publisher.publish_question_event(QUESTION_CREATED, question.id, author_id, question.title)
    return question


def list_questions(
    *,
    tag_id: Optional[int] = None,
    author_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = 1,
    per_page: int = 20,
) -> Dict[str, Any]:
    query = Question.query.options(selectinload(Question.tags), selectinload(Question.author))
    if tag_id is not None:
        query = query.join(question_tags, question_tags.c.question_id == Question.id).filter(
            question_tags.c.tag_id == tag_id
        )
    if author_id is not None:
        query = query.filter(Question.author_id == author_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(Question.title.ilike(pattern), Question.content.ilike(pattern)))
    query = query.order_by(Question.created_at.desc(), Question.id.desc())
    return paginate(query, page=page, per_page=per_page)


def get_question(question_id: int, *, count_view: bool = False) -> Optional[Question]:
    question = db.session.get(Question, question_id)
    if question and count_view:
        question.view_count = (question.view_count or 0) + 1
        db.session.commit()
    return question


def update_question(
    question_id: int,
    acting_user_id: int,
    *,
    title: Optional[str] = None,
    content: Optional[str] = None,
    tag_ids: Optional[Sequence[int]] = None,
) -> Question:
    question = db.session.get(Question, question_id)
    if not question:
        raise ValueError("not_found")
    if question.author_id != acting_user_id:
        raise ValueError("forbidden")
    if title is not None:
        question.title = title.strip()
    if content is not None:
        question.content = content.strip()
    if tag_ids is not None:
        _set_tags(question, _load_tags(tag_ids))
    db.session.commit()
    event_publisher.publish_question_event(QUESTION_EDITED, question.id, acting_user_id, question.title)
    return question


def delete_question(question_id: int, acting_user_id: int) -> bool:
    question = db.session.get(Question, question_id)
    if not question:
        return False
    title = question.title
    _set_tags(question, [])
    delete_and_commit(question)
    event_publisher.publish_question_event(QUESTION_DELETED, question_id, acting_user_id, title)
    return True


def like_question(question_id: int, user_id: int) -> Tuple[Question, bool]:
    """Returns the question and whether the like was newly recorded."""
    question = db.session.get(Question, question_id)
    user = db.session.get(User, user_id)
    if not question or not user:
        raise ValueError("not_found")
    if user in question.liked_by:
        return question, False
    question.liked_by.append(user)
    question.like_count = (question.like_count or 0) + 1
    db.session.commit()
    event_publisher.publish_engagement_event(QUESTION_LIKED, user_id, question_id=question.id)
    return question, True


def unlike_question(question_id: int, user_id: int) -> Tuple[Question, bool]:
    question = db.session.get(Question, question_id)
    user = db.session.get(User, user_id)
    if not question or not user:
        raise ValueError("not_found")
    if user not in question.liked_by:
        return question, False
    question.liked_by.remove(user)
    question.like_count = max((question.like_count or 0) - 1, 0)
    db.session.commit()
    event_publisher.publish_engagement_event(QUESTION_UNLIKED, user_id, question_id=question.id)
    return question, True
