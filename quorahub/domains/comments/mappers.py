"""DTO mappers for comments."""

from __future__ import annotations

from quorahub.domains.comments.models.comment_models import Comment
from quorahub.domains.questions.mappers import map_author


def map_comment(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "answer_id": comment.answer_id,
        "parent_id": comment.parent_id,
        "content": comment.content,
        "author": map_author(comment.author),
        "like_count": comment.like_count or 0,
        "reply_count": comment.reply_count,
        "created_at": comment.created_at.isoformat() if comment.created_at else None,
        "updated_at": comment.updated_at.isoformat() if comment.updated_at else None,
    }
