"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import jsonify
from flask_login import current_user

from quorahub.extensions import login_manager

F = TypeVar("F", bound=Callable)


def require_roles(*required_roles: str):
    """Allow the route only for a principal holding one of ``required_roles``."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if not current_user.has_any_role(required_roles):
                return jsonify({"ok": False, "error": "forbidden"}), 403
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def validation_error(exc) -> tuple:
    """400 body for a pydantic ValidationError."""
    errors = exc.errors(include_url=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return jsonify({"ok": False, "error": "validation_error", "details": errors}), 400
