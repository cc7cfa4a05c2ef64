"""User profile, account and tag-follow services.

Mutations commit first and publish afterwards; a publish failure never
rolls the change back.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_

from quorahub.core.auth.password import hash_password, verify_password
from quorahub.core.events.event_types import (
    ANSWER_DELETED,
    AUDIT_DELETE,
    AUDIT_UPDATE,
    QUESTION_DELETED,
    RESOURCE_USER,
    USER_FOLLOWED_TAG,
    USER_PROFILE_UPDATED,
    USER_UNFOLLOWED_TAG,
)
from quorahub.core.events.publisher import event_publisher
from quorahub.core.users.models import User
from quorahub.core.utils.pagination import paginate
from quorahub.core.utils.persistence import delete_and_commit
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.comments.models.comment_models import Comment
from quorahub.domains.questions.models.question_models import Question
from quorahub.domains.tags.models.tag_models import Tag
from quorahub.extensions import db

logger = logging.getLogger(__name__)


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_login(login: str) -> Optional[User]:
    """Look up by username or (case-insensitive) email."""
    value = (login or "").strip()
    if not value:
        return None
    return User.query.filter(
        or_(User.username == value, func.lower(User.email) == value.lower())
    ).first()


def get_user_by_username(username: str) -> Optional[User]:
    return User.query.filter(User.username == (username or "").strip()).first()


def get_user_by_email(email: str) -> Optional[User]:
    return User.query.filter(func.lower(User.email) == (email or "").strip().lower()).first()


def list_users(*, search: Optional[str] = None, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    query = User.query.filter(User.is_active.is_(True))
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
    return paginate(query.order_by(User.id), page=page, per_page=per_page)


def update_profile(user_id: int, **fields) -> User:
    user = get_user(user_id)
    if not user:
        raise ValueError("not_found")
    if fields.get("email"):
        email = fields["email"].strip().lower()
        clash = User.query.filter(func.lower(User.email) == email, User.id != user.id).first()
        if clash:
            raise ValueError("duplicate")
        fields["email"] = email
    for key in ("email", "first_name", "last_name", "bio"):
        if key in fields and fields[key] is not None:
            val = fields[key]
            setattr(user, key, val.strip() if isinstance(val, str) else val)
    db.session.commit()
    event_publisher.publish_user_event(USER_PROFILE_UPDATED, user.id, user.username, user.email)
    return user


def change_password(user_id: int, old_password: str, new_password: str) -> User:
    user = get_user(user_id)
    if not user:
        raise ValueError("not_found")
    if not verify_password(old_password, user.password_hash):
        raise ValueError("invalid_password")
    user.password_hash = hash_password(new_password)
    db.session.commit()
    logger.info("Password changed for user %s", user.id)
    event_publisher.publish_audit(user.id, AUDIT_UPDATE, RESOURCE_USER, user.id, "password changed")
    return user


def user_statistics(user_id: int) -> Dict[str, int]:
    """Authored question, answer and comment counts."""
    if not get_user(user_id):
        raise ValueError("not_found")

    def _count(model) -> int:
        return db.session.query(func.count(model.id)).filter(model.author_id == user_id).scalar() or 0

    return {"questions": _count(Question), "answers": _count(Answer), "comments": _count(Comment)}


def delete_user(user_id: int, *, acting_user_id: int) -> bool:
    """Remove a user with everything they authored.

    The cascade drops their questions, answers and comments, so counters on
    the surviving rows are settled here and a delete event goes out for every
    question and answer that disappears.
    """
    user = get_user(user_id)
    if not user:
        return False
    for tag in list(user.followed_tags):
        tag.follower_count = max((tag.follower_count or 0) - 1, 0)
    for liked in (*user.liked_questions, *user.liked_answers, *user.liked_comments):
        liked.like_count = max((liked.like_count or 0) - 1, 0)

    deleted_questions = []
    for question in list(user.questions):
        deleted_questions.append((question.id, question.title))
        for tag in question.tags:
            tag.question_count = max((tag.question_count or 0) - 1, 0)
    own_question_ids = {qid for qid, _ in deleted_questions}
    # Answers under the user's own questions go with the question's index entry.
    deleted_answers = [
        (answer.id, answer.question_id) for answer in user.answers if answer.question_id not in own_question_ids
    ]

    username = user.username
    delete_and_commit(user)
    for question_id, title in deleted_questions:
        event_publisher.publish_question_event(QUESTION_DELETED, question_id, acting_user_id, title)
    for answer_id, question_id in deleted_answers:
        event_publisher.publish_answer_event(ANSWER_DELETED, answer_id, question_id, acting_user_id)
    event_publisher.publish_audit(acting_user_id, AUDIT_DELETE, RESOURCE_USER, user_id, f"username={username}")
    return True


def follow_tag(user_id: int, tag_id: int) -> Tuple[Tag, bool]:
    """Returns the tag and whether membership changed."""
    user = get_user(user_id)
    tag = db.session.get(Tag, tag_id)
    if not user or not tag:
        raise ValueError("not_found")
    if tag in user.followed_tags:
        return tag, False
    user.followed_tags.append(tag)
    tag.follower_count = (tag.follower_count or 0) + 1
    db.session.commit()
    event_publisher.publish_engagement_event(USER_FOLLOWED_TAG, user.id, tag_id=tag.id, tag_name=tag.name)
    return tag, True


def unfollow_tag(user_id: int, tag_id: int) -> Tuple[Tag, bool]:
    user = get_user(user_id)
    tag = db.session.get(Tag, tag_id)
    if not user or not tag:
        raise ValueError("not_found")
    if tag not in user.followed_tags:
        return tag, False
    user.followed_tags.remove(tag)
    tag.follower_count = max((tag.follower_count or 0) - 1, 0)
    db.session.commit()
    event_publisher.publish_engagement_event(USER_UNFOLLOWED_TAG, user.id, tag_id=tag.id, tag_name=tag.name)
    return tag, True


def list_followed_tags(user_id: int) -> List[Tag]:
    user = get_user(user_id)
    if not user:
        raise ValueError("not_found")
    return sorted(user.followed_tags, key=lambda t: t.name)
