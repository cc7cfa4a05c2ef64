"""Public search endpoint."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from quorahub.core.search.models import SearchDocument
from quorahub.core.search.services import search
from quorahub.core.utils.pagination import page_args, page_response

search_api_bp = Blueprint("search_api", __name__)


def map_search_document(doc: SearchDocument) -> dict:
    return {
        "type": doc.doc_type,
        "id": doc.doc_id,
        "question_id": doc.question_id,
        "title": doc.title,
        "snippet": (doc.body or "")[:200],
        "updated_at": doc.updated_at.isoformat() if doc.updated_at else None,
    }


@search_api_bp.get("")
def search_documents():
    term = (request.args.get("q") or "").strip()
    if not term:
        return jsonify({"ok": False, "error": "validation_error", "details": [{"loc": ["q"], "msg": "required"}]}), 400
    page, per_page = page_args(request.args)
    return jsonify(page_response(search(term, page=page, per_page=per_page), "results", map_search_document))
