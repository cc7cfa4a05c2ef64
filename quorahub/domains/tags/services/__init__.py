"""Tag services; changes are recorded on audit-log-events."""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import func

from quorahub.core.events.event_types import AUDIT_CREATE, AUDIT_DELETE, RESOURCE_TAG
from quorahub.core.events.publisher import event_publisher
from quorahub.core.utils.pagination import paginate
from quorahub.core.utils.persistence import delete_and_commit
from quorahub.domains.tags.models.tag_models import Tag
from quorahub.extensions import db


def list_tags(*, search: Optional[str] = None, page: int = 1, per_page: int = 50) -> Dict[str, Any]:
    query = Tag.query
    if search:
        query = query.filter(Tag.name.ilike(f"%{search.strip().lower()}%"))
    return paginate(query.order_by(Tag.name), page=page, per_page=per_page)


def get_tag(tag_id: int) -> Optional[Tag]:
    return db.session.get(Tag, tag_id)


def get_tag_by_name(name: str) -> Optional[Tag]:
    return Tag.query.filter(func.lower(Tag.name) == name.strip().lower()).first()


def create_tag(*, name: str, description: Optional[str] = None, acting_user_id: Optional[int] = None) -> Tag:
    if get_tag_by_name(name):
        raise ValueError("duplicate")
    tag = Tag(name=name.strip().lower(), description=(description or "").strip() or None)
    db.session.add(tag)
    db.session.commit()
    event_publisher.publish_audit(acting_user_id, AUDIT_CREATE, RESOURCE_TAG, tag.id, f"name={tag.name}")
    return tag


def delete_tag(tag_id: int, *, acting_user_id: Optional[int] = None) -> bool:
    tag = get_tag(tag_id)
    if not tag:
        return False
    name = tag.name
    delete_and_commit(tag)
    event_publisher.publish_audit(acting_user_id, AUDIT_DELETE, RESOURCE_TAG, tag_id, f"name={name}")
    return True
