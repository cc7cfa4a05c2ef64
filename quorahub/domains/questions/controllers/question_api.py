"""Questions JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from quorahub.core.users.models import ROLE_ADMIN, ROLE_MODERATOR
from quorahub.core.utils.decorators import require_roles, validation_error
from quorahub.core.utils.pagination import page_args, page_response
from quorahub.domains.questions import services
from quorahub.domains.questions.mappers import map_question
from quorahub.domains.questions.schemas.question_schemas import QuestionCreate, QuestionUpdate

question_api_bp = Blueprint("questions_api", __name__)

_ERROR_STATUS = {"not_found": 404, "forbidden": 403, "invalid_tag": 400}


def _error(exc: ValueError):
    code = str(exc)
    if code not in _ERROR_STATUS:
        raise exc
    return jsonify({"ok": False, "error": code}), _ERROR_STATUS[code]


@question_api_bp.get("")
def list_questions():
    page, per_page = page_args(request.args)
    tag_id = request.args.get("tag_id", type=int)
    author_id = request.args.get("author_id", type=int)
    result = services.list_questions(
        tag_id=tag_id,
        author_id=author_id,
        search=request.args.get("search"),
        page=page,
        per_page=per_page,
    )
    return jsonify(page_response(result, "questions", map_question))


@question_api_bp.get("/<int:question_id>")
def get_question(question_id: int):
    question = services.get_question(question_id, count_view=True)
    if not question:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "question": map_question(question)})


@question_api_bp.post("")
@login_required
def create_question():
    payload = request.get_json(silent=True) or {}
    try:
        data = QuestionCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        question = services.create_question(current_user.id, **data.model_dump())
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "question": map_question(question)}), 201


@question_api_bp.patch("/<int:question_id>")
@login_required
def update_question(question_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = QuestionUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        question = services.update_question(question_id, current_user.id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "question": map_question(question)})


@question_api_bp.delete("/<int:question_id>")
@require_roles(ROLE_ADMIN, ROLE_MODERATOR)
def delete_question(question_id: int):
    if not services.delete_question(question_id, current_user.id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@question_api_bp.post("/<int:question_id>/like")
@login_required
def like_question(question_id: int):
    try:
        question, changed = services.like_question(question_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": True, "changed": changed, "like_count": question.like_count})


@question_api_bp.delete("/<int:question_id>/like")
@login_required
def unlike_question(question_id: int):
    try:
        question, changed = services.unlike_question(question_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": False, "changed": changed, "like_count": question.like_count})
