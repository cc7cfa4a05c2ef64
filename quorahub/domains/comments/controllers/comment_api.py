"""Comments JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from quorahub.core.users.models import ROLE_ADMIN, ROLE_MODERATOR
from quorahub.core.utils.decorators import validation_error
from quorahub.core.utils.pagination import page_args, page_response
from quorahub.domains.comments import services
from quorahub.domains.comments.mappers import map_comment
from quorahub.domains.comments.schemas.comment_schemas import CommentCreate, CommentUpdate

comment_api_bp = Blueprint("comments_api", __name__)

_ERROR_STATUS = {"not_found": 404, "forbidden": 403, "invalid_parent": 400}


def _error(exc: ValueError):
    code = str(exc)
    if code not in _ERROR_STATUS:
        raise exc
    return jsonify({"ok": False, "error": code}), _ERROR_STATUS[code]


def _required(name: str):
    return jsonify({"ok": False, "error": "validation_error", "details": [{"loc": [name], "msg": "required"}]}), 400


@comment_api_bp.get("")
def list_comments():
    answer_id = request.args.get("answer_id", type=int) or request.args.get("answerId", type=int)
    if not answer_id:
        return _required("answer_id")
    page, per_page = page_args(request.args)
    try:
        result = services.list_comments(answer_id, page=page, per_page=per_page)
    except ValueError as exc:
        return _error(exc)
    return jsonify(page_response(result, "comments", map_comment))


@comment_api_bp.get("/replies")
def list_replies():
    parent_id = request.args.get("parent_id", type=int) or request.args.get("parentId", type=int)
    if not parent_id:
        return _required("parent_id")
    page, per_page = page_args(request.args)
    try:
        result = services.list_replies(parent_id, page=page, per_page=per_page)
    except ValueError as exc:
        return _error(exc)
    return jsonify(page_response(result, "comments", map_comment))


@comment_api_bp.get("/<int:comment_id>")
def get_comment(comment_id: int):
    comment = services.get_comment(comment_id)
    if not comment:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "comment": map_comment(comment)})


@comment_api_bp.post("")
@login_required
def create_comment():
    payload = request.get_json(silent=True) or {}
    try:
        data = CommentCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        comment = services.create_comment(
            current_user.id, answer_id=data.answer_id, content=data.content, parent_id=data.parent_id
        )
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "comment": map_comment(comment)}), 201


@comment_api_bp.patch("/<int:comment_id>")
@login_required
def update_comment(comment_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = CommentUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        comment = services.update_comment(comment_id, current_user.id, content=data.content)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "comment": map_comment(comment)})


@comment_api_bp.delete("/<int:comment_id>")
@login_required
def delete_comment(comment_id: int):
    moderator = current_user.has_any_role([ROLE_ADMIN, ROLE_MODERATOR])
    try:
        deleted = services.delete_comment(comment_id, current_user.id, moderator=moderator)
    except ValueError as exc:
        return _error(exc)
    if not deleted:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@comment_api_bp.post("/<int:comment_id>/like")
@login_required
def like_comment(comment_id: int):
    try:
        comment, changed = services.like_comment(comment_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": True, "changed": changed, "like_count": comment.like_count})


@comment_api_bp.delete("/<int:comment_id>/like")
@login_required
def unlike_comment(comment_id: int):
    try:
        comment, changed = services.unlike_comment(comment_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": False, "changed": changed, "like_count": comment.like_count})
