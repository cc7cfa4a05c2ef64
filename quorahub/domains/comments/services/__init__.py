"""Comment services.

Comments have no channel of their own; their changes are recorded on
audit-log-events.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from quorahub.core.events.event_types import (
    AUDIT_CREATE,
    AUDIT_DELETE,
    AUDIT_LIKE,
    AUDIT_UNLIKE,
    AUDIT_UPDATE,
    RESOURCE_COMMENT,
)
from quorahub.core.events.publisher import event_publisher
from quorahub.core.users.models import User
from quorahub.core.utils.pagination import paginate
from quorahub.core.utils.persistence import delete_and_commit
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.comments.models.comment_models import Comment
from quorahub.extensions import db


def create_comment(author_id: int, *, answer_id: int, content: str, parent_id: Optional[int] = None) -> Comment:
    answer = db.session.get(Answer, answer_id)
    author = db.session.get(User, author_id)
    if not answer or not author:
        raise ValueError("not_found")
    parent = None
    if parent_id is not None:
        parent = db.session.get(Comment, parent_id)
        if not parent or parent.answer_id != answer.id:
            raise ValueError("invalid_parent")
    comment = Comment(content=content.strip(), answer=answer, author=author, parent=parent)
    db.session.add(comment)
    db.session.commit()
    event_publisher.publish_audit(
        author_id, AUDIT_CREATE, RESOURCE_COMMENT, comment.id, f"answer_id={answer.id}"
    )
    return comment


def get_comment(comment_id: int) -> Optional[Comment]:
    return db.session.get(Comment, comment_id)


def list_comments(answer_id: int, *, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    """Top-level comments of an answer, oldest first."""
    if not db.session.get(Answer, answer_id):
        raise ValueError("not_found")
    query = Comment.query.filter(Comment.answer_id == answer_id, Comment.parent_id.is_(None)).order_by(
        Comment.created_at.asc(), Comment.id.asc()
    )
    return paginate(query, page=page, per_page=per_page)


def list_replies(parent_id: int, *, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    if not get_comment(parent_id):
        raise ValueError("not_found")
    query = Comment.query.filter(Comment.parent_id == parent_id).order_by(Comment.created_at.asc(), Comment.id.asc())
    return paginate(query, page=page, per_page=per_page)


def update_comment(comment_id: int, acting_user_id: int, *, content: str) -> Comment:
    comment = get_comment(comment_id)
    if not comment:
        raise ValueError("not_found")
    if comment.author_id != acting_user_id:
        raise ValueError("forbidden")
    comment.content = content.strip()
    db.session.commit()
    event_publisher.publish_audit(acting_user_id, AUDIT_UPDATE, RESOURCE_COMMENT, comment.id)
    return comment


def delete_comment(comment_id: int, acting_user_id: int, *, moderator: bool = False) -> bool:
    """Delete a comment together with its replies."""
    comment = get_comment(comment_id)
    if not comment:
        return False
    if comment.author_id != acting_user_id and not moderator:
        raise ValueError("forbidden")
    answer_id = comment.answer_id
    delete_and_commit(comment)
    event_publisher.publish_audit(
        acting_user_id, AUDIT_DELETE, RESOURCE_COMMENT, comment_id, f"answer_id={answer_id}"
    )
    return True


def like_comment(comment_id: int, user_id: int) -> Tuple[Comment, bool]:
    comment = get_comment(comment_id)
    user = db.session.get(User, user_id)
    if not comment or not user:
        raise ValueError("not_found")
    if user in comment.liked_by:
        return comment, False
    comment.liked_by.append(user)
    comment.like_count = (comment.like_count or 0) + 1
    db.session.commit()
    event_publisher.publish_audit(user_id, AUDIT_LIKE, RESOURCE_COMMENT, comment.id)
    return comment, True


def unlike_comment(comment_id: int, user_id: int) -> Tuple[Comment, bool]:
    comment = get_comment(comment_id)
    user = db.session.get(User, user_id)
    if not comment or not user:
        raise ValueError("not_found")
    if user not in comment.liked_by:
        return comment, False
    comment.liked_by.remove(user)
    comment.like_count = max((comment.like_count or 0) - 1, 0)
    db.session.commit()
    event_publisher.publish_audit(user_id, AUDIT_UNLIKE, RESOURCE_COMMENT, comment.id)
    return comment, True
