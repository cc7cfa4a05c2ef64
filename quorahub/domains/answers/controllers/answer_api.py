"""Answers JSON API."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from quorahub.core.users.models import ROLE_ADMIN, ROLE_MODERATOR
from quorahub.core.utils.decorators import validation_error
from quorahub.core.utils.pagination import page_args, page_response
from quorahub.domains.answers import services
from quorahub.domains.answers.mappers import map_answer
from quorahub.domains.answers.schemas.answer_schemas import AnswerCreate, AnswerUpdate

answer_api_bp = Blueprint("answers_api", __name__)

_ERROR_STATUS = {"not_found": 404, "forbidden": 403}


def _error(exc: ValueError):
    code = str(exc)
    if code not in _ERROR_STATUS:
        raise exc
    return jsonify({"ok": False, "error": code}), _ERROR_STATUS[code]


@answer_api_bp.get("")
def list_answers():
    question_id = request.args.get("question_id", type=int) or request.args.get("questionId", type=int)
    if not question_id:
        return jsonify({"ok": False, "error": "validation_error", "details": [{"loc": ["question_id"], "msg": "required"}]}), 400
    page, per_page = page_args(request.args)
    try:
        result = services.list_answers(question_id, page=page, per_page=per_page)
    except ValueError as exc:
        return _error(exc)
    return jsonify(page_response(result, "answers", map_answer))


@answer_api_bp.get("/<int:answer_id>")
def get_answer(answer_id: int):
    answer = services.get_answer(answer_id)
    if not answer:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "answer": map_answer(answer)})


@answer_api_bp.post("")
@login_required
def create_answer():
    payload = request.get_json(silent=True) or {}
    try:
        data = AnswerCreate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        answer = services.create_answer(current_user.id, question_id=data.question_id, content=data.content)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "answer": map_answer(answer)}), 201


@answer_api_bp.patch("/<int:answer_id>")
@login_required
def update_answer(answer_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = AnswerUpdate.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        answer = services.update_answer(answer_id, current_user.id, content=data.content)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "answer": map_answer(answer)})


@answer_api_bp.delete("/<int:answer_id>")
@login_required
def delete_answer(answer_id: int):
    moderator = current_user.has_any_role([ROLE_ADMIN, ROLE_MODERATOR])
    try:
        deleted = services.delete_answer(answer_id, current_user.id, moderator=moderator)
    except ValueError as exc:
        return _error(exc)
    if not deleted:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})


@answer_api_bp.post("/<int:answer_id>/accept")
@login_required
def accept_answer(answer_id: int):
    try:
        answer, changed = services.accept_answer(answer_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "changed": changed, "answer": map_answer(answer)})


@answer_api_bp.delete("/<int:answer_id>/accept")
@login_required
def unaccept_answer(answer_id: int):
    try:
        answer, changed = services.unaccept_answer(answer_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "changed": changed, "answer": map_answer(answer)})


@answer_api_bp.post("/<int:answer_id>/like")
@login_required
def like_answer(answer_id: int):
    try:
        answer, changed = services.like_answer(answer_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": True, "changed": changed, "like_count": answer.like_count})


@answer_api_bp.delete("/<int:answer_id>/like")
@login_required
def unlike_answer(answer_id: int):
    try:
        answer, changed = services.unlike_answer(answer_id, current_user.id)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ok": True, "liked": False, "changed": changed, "like_count": answer.like_count})
