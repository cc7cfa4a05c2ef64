"""Pagination helpers for SQLAlchemy queries."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Tuple

from sqlalchemy.orm import Query

MAX_PER_PAGE = 100
DEFAULT_PER_PAGE = 20


def page_args(args: Mapping[str, str], default_per_page: int = DEFAULT_PER_PAGE) -> Tuple[int, int]:
    """Read ``page``/``per_page`` from query args; malformed values fall back to defaults."""
    try:
        page = int(args.get("page", 1))
    except (TypeError, ValueError):
        page = 1
    try:
        per_page = int(args.get("per_page", default_per_page))
    except (TypeError, ValueError):
        per_page = default_per_page
    return max(page, 1), max(min(per_page, MAX_PER_PAGE), 1)


def paginate(query: Query, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> Dict[str, Any]:
    page = max(page, 1)
    per_page = max(min(per_page, MAX_PER_PAGE), 1)
    items = query.limit(per_page).offset((page - 1) * per_page).all()
    total = query.order_by(None).count()
    return {"items": items, "page": page, "per_page": per_page, "total": total}


def page_response(result: Dict[str, Any], key: str, mapper: Callable[[Any], dict]) -> Dict[str, Any]:
    return {
        "ok": True,
        key: [mapper(item) for item in result["items"]],
        "page": result["page"],
        "per_page": result["per_page"],
        "total": result["total"],
    }
