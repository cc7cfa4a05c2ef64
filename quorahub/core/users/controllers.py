"""User API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from quorahub.core.users import services
from quorahub.core.users.models import ROLE_ADMIN
from quorahub.core.users.schemas import PasswordChangeRequest, UserUpdateRequest, serialize_user
from quorahub.core.utils.decorators import require_roles, validation_error
from quorahub.core.utils.pagination import page_args, page_response
from quorahub.domains.tags.mappers import map_tag

user_api_bp = Blueprint("user_api", __name__)


def _user_dict(user) -> dict:
    return serialize_user(user).model_dump()


@user_api_bp.get("")
@login_required
def list_users():
    page, per_page = page_args(request.args)
    result = services.list_users(search=request.args.get("search"), page=page, per_page=per_page)
    return jsonify(page_response(result, "users", _user_dict))


@user_api_bp.get("/<int:user_id>")
@login_required
def get_user(user_id: int):
    user = services.get_user(user_id)
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": _user_dict(user)})


@user_api_bp.patch("/<int:user_id>")
@login_required
def update_user(user_id: int):
    if user_id != current_user.id and not current_user.has_any_role([ROLE_ADMIN]):
        return jsonify({"ok": False, "error": "forbidden"}), 403
    payload = request.get_json(silent=True) or {}
    try:
        data = UserUpdateRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        user = services.update_profile(user_id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        code = str(exc)
        if code == "not_found":
            return jsonify({"ok": False, "error": code}), 404
        if code == "duplicate":
            return jsonify({"ok": False, "error": code}), 409
        raise
    return jsonify({"ok": True, "user": _user_dict(user)})


@user_api_bp.put("/<int:user_id>/password")
@login_required
def change_password(user_id: int):
    # The old password is required, so only the owner can do this.
    if user_id != current_user.id:
        return jsonify({"ok": False, "error": "forbidden"}), 403
    payload = request.get_json(silent=True) or {}
    try:
        data = PasswordChangeRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        services.change_password(user_id, data.old_password, data.new_password)
    except ValueError as exc:
        code = str(exc)
        if code == "not_found":
            return jsonify({"ok": False, "error": code}), 404
        return jsonify({"ok": False, "error": code}), 400
    return jsonify({"ok": True})


@user_api_bp.get("/search/username/<string:username>")
@login_required
def get_user_by_username(username: str):
    user = services.get_user_by_username(username)
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": _user_dict(user)})


@user_api_bp.get("/search/email/<string:email>")
@login_required
def get_user_by_email(email: str):
    user = services.get_user_by_email(email)
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": _user_dict(user)})


@user_api_bp.get("/<int:user_id>/statistics")
@user_api_bp.get("/<int:user_id>/statistics/<any(questions, answers, comments):kind>")
@login_required
def user_statistics(user_id: int, kind: str | None = None):
    try:
        stats = services.user_statistics(user_id)
    except ValueError:
        return jsonify({"ok": False, "error": "not_found"}), 404
    if kind:
        return jsonify({"ok": True, kind: stats[kind]})
    return jsonify({"ok": True, "statistics": stats})


@user_api_bp.delete("/<int:user_id>")
@require_roles(ROLE_ADMIN)
def delete_user(user_id: int):
    if not services.delete_user(user_id, acting_user_id=current_user.id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@user_api_bp.get("/me/tags")
@login_required
def followed_tags():
    tags = services.list_followed_tags(current_user.id)
    return jsonify({"ok": True, "tags": [map_tag(t) for t in tags]})


@user_api_bp.post("/me/tags/<int:tag_id>")
@login_required
def follow_tag(tag_id: int):
    try:
        tag, changed = services.follow_tag(current_user.id, tag_id)
    except ValueError:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "following": True, "changed": changed, "tag": map_tag(tag)})


@user_api_bp.delete("/me/tags/<int:tag_id>")
@login_required
def unfollow_tag(tag_id: int):
    try:
        tag, changed = services.unfollow_tag(current_user.id, tag_id)
    except ValueError:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "following": False, "changed": changed, "tag": map_tag(tag)})
