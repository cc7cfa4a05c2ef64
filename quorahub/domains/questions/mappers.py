"""DTO mappers for questions."""

from __future__ import annotations

from quorahub.domains.questions.models.question_models import Question


def map_author(user) -> dict:
    return {"id": user.id, "username": user.username}


def map_question(question: Question) -> dict:
    return {
        "id": question.id,
        "title": question.title,
        "content": question.content,
        "author": map_author(question.author),
        "tags": [{"id": t.id, "name": t.name} for t in sorted(question.tags, key=lambda t: t.name)],
        "view_count": question.view_count or 0,
        "like_count": question.like_count or 0,
        "answer_count": question.answer_count,
        "created_at": question.created_at.isoformat() if question.created_at else None,
        "updated_at": question.updated_at.isoformat() if question.updated_at else None,
    }
