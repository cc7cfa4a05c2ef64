"""Tags JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user
from pydantic import ValidationError

from quorahub.core.users.models import ROLE_ADMIN
from quorahub.core.utils.decorators import require_roles, validation_error
from quorahub.core.utils.pagination import page_args, page_response
from quorahub.domains.tags import services
from quorahub.domains.tags.mappers import map_tag
from quorahub.domains.tags.schemas.tag_schemas import TagCreate

tag_api_bp = Blueprint("tags_api", __name__)


@tag_api_bp.get("")
def list_tags():
    page, per_page = page_args(request.args, default_per_page=50)
    result = services.list_tags(search=request.args.get("search"), page=page, per_page=per_page)
    return jsonify(page_response(result, "tags", map_tag))


@tag_api_bp.get("/<int:tag_id>")
def get_tag(tag_id: int):
    tag = services.get_tag(tag_id)
    if not tag:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "tag": map_tag(tag)})


@tag_api_bp.post("")
@require_roles(ROLE_ADMIN)
def create_tag():
    payload = request.get_json(silent=True) or {}
    try:
        data = TagCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        tag = services.create_tag(acting_user_id=current_user.id, **data.model_dump())
    except ValueError as exc:
        if str(exc) == "duplicate":
            return jsonify({"ok": False, "error": "duplicate"}), 409
        raise
    return jsonify({"ok": True, "tag": map_tag(tag)}), 201


@tag_api_bp.delete("/<int:tag_id>")
@require_roles(ROLE_ADMIN)
def delete_tag(tag_id: int):
    if not services.delete_tag(tag_id, acting_user_id=current_user.id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
