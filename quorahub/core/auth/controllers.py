"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from quorahub.core.auth.auth_service import (
    authenticate_user,
    issue_tokens,
    refresh_tokens,
    register_user,
)
from quorahub.core.auth.schemas import LoginRequest, RefreshRequest, RegisterRequest
from quorahub.core.users.schemas import serialize_user
from quorahub.core.users.services import get_user
from quorahub.core.utils.decorators import validation_error
from quorahub.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)

_REGISTER_ERRORS = {
    "username_taken": "Username is already taken",
    "email_taken": "Email address already in use",
}


@auth_bp.post("/register")
@limiter.limit("5/minute")
def register():
    payload = request.get_json(silent=True) or {}
    try:
        data = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        user = register_user(data)
    except ValueError as exc:
        code = str(exc)
        return jsonify({"ok": False, "error": code, "message": _REGISTER_ERRORS.get(code)}), 400
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()}), 201


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = request.get_json(silent=True) or {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    user = authenticate_user(data.username_or_email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return jsonify({"ok": True, **issue_tokens(user), "user": serialize_user(user).model_dump()})


@auth_bp.post("/refresh")
@limiter.limit("30/minute")
def refresh():
    payload = request.get_json(silent=True) or {}
    try:
        data = RefreshRequest.model_validate(payload)
    except ValidationError as exc:
        return validation_error(exc)
    try:
        user, tokens = refresh_tokens(data.refresh_token)
    except ValueError:
        return jsonify({"ok": False, "error": "invalid_token"}), 401
    return jsonify({"ok": True, **tokens, "user": serialize_user(user).model_dump()})


@auth_bp.get("/me")
@login_required
def me():
    user = get_user(current_user.id)
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})


@auth_bp.post("/logout")
def logout():
    # Tokens are stateless; the client drops them.
    return jsonify({"ok": True})
