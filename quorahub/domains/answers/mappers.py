"""DTO mappers for answers."""

from __future__ import annotations

from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.questions.mappers import map_author


def map_answer(answer: Answer) -> dict:
    return {
        "id": answer.id,
        "question_id": answer.question_id,
        "content": answer.content,
        "author": map_author(answer.author),
        "like_count": answer.like_count or 0,
        "is_accepted": bool(answer.is_accepted),
        "comment_count": answer.comment_count,
        "created_at": answer.created_at.isoformat() if answer.created_at else None,
        "updated_at": answer.updated_at.isoformat() if answer.updated_at else None,
    }
