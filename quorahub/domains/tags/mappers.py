"""DTO mappers for tags."""

from __future__ import annotations

from quorahub.domains.tags.models.tag_models import Tag


def map_tag(tag: Tag) -> dict:
    return {
        "id": tag.id,
        "name": tag.name,
        "description": tag.description,
        "follower_count": tag.follower_count or 0,
        "question_count": tag.question_count or 0,
        "created_at": tag.created_at.isoformat() if tag.created_at else None,
    }
