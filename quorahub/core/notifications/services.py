"""Notification persistence and inbox queries."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from quorahub.core.notifications.models import Notification
from quorahub.core.utils.pagination import paginate
from quorahub.extensions import db


def record_notification(user_id: int, notification_type: str, message: str) -> Notification:
    notification = Notification(user_id=user_id, notification_type=notification_type, message=message)
    db.session.add(notification)
    db.session.commit()
    return notification


def list_notifications(user_id: int, *, unread_only: bool = False, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    query = Notification.query.filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.read_at.is_(None))
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
    return paginate(query, page=page, per_page=per_page)


def mark_read(user_id: int, notification_id: int) -> Notification:
    notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
    if not notification:
        raise ValueError("not_found")
    if notification.read_at is None:
        notification.read_at = datetime.utcnow()
        db.session.commit()
    return notification


def mark_all_read(user_id: int) -> int:
    updated = Notification.query.filter(
        Notification.user_id == user_id, Notification.read_at.is_(None)
    ).update({Notification.read_at: datetime.utcnow()}, synchronize_session=False)
    db.session.commit()
    return updated
