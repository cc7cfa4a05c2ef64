"""Notification inbox API for the current user."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from quorahub.core.notifications.models import Notification
from quorahub.core.notifications.services import list_notifications, mark_all_read, mark_read
from quorahub.core.utils.pagination import page_args, page_response

notification_api_bp = Blueprint("notification_api", __name__)


def map_notification(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "notification_type": notification.notification_type,
        "message": notification.message,
        "read": notification.is_read,
        "read_at": notification.read_at.isoformat() if notification.read_at else None,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


@notification_api_bp.get("")
@login_required
def list_mine():
    page, per_page = page_args(request.args)
    unread_only = request.args.get("unread", "").lower() in ("1", "true", "yes")
    result = list_notifications(current_user.id, unread_only=unread_only, page=page, per_page=per_page)
    return jsonify(page_response(result, "notifications", map_notification))


@notification_api_bp.post("/<int:notification_id>/read")
@login_required
def read_one(notification_id: int):
    try:
        notification = mark_read(current_user.id, notification_id)
    except ValueError:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "notification": map_notification(notification)})


@notification_api_bp.post("/read-all")
@login_required
def read_all():
    return jsonify({"ok": True, "updated": mark_all_read(current_user.id)})
