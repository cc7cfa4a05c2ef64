"""Search index maintenance and lookup."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import or_

from quorahub.core.search.models import DOC_ANSWER, DOC_QUESTION, SearchDocument
from quorahub.core.utils.pagination import paginate
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.questions.models.question_models import Question
from quorahub.extensions import db

logger = logging.getLogger(__name__)


def _upsert(doc_type: str, doc_id: int, question_id: int, title: Optional[str], body: str) -> SearchDocument:
    doc = SearchDocument.query.filter_by(doc_type=doc_type, doc_id=doc_id).first()
    if doc is None:
        doc = SearchDocument(doc_type=doc_type, doc_id=doc_id, question_id=question_id)
        db.session.add(doc)
    doc.title = title
    doc.body = body
    db.session.commit()
    return doc


def index_question(question_id: int) -> Optional[SearchDocument]:
    question = db.session.get(Question, question_id)
    if question is None:
        logger.info("Question %s gone before indexing; skipping", question_id)
        return None
    tags = " ".join(t.name for t in question.tags)
    body = f"{question.content}\n{tags}" if tags else question.content
    return _upsert(DOC_QUESTION, question.id, question.id, question.title, body)


def index_answer(answer_id: int) -> Optional[SearchDocument]:
    answer = db.session.get(Answer, answer_id)
    if answer is None:
        logger.info("Answer %s gone before indexing; skipping", answer_id)
        return None
    return _upsert(DOC_ANSWER, answer.id, answer.question_id, None, answer.content)


def remove_question(question_id: int) -> int:
    """Drop a question and every answer indexed under it."""
    removed = SearchDocument.query.filter(
        or_(
            (SearchDocument.doc_type == DOC_QUESTION) & (SearchDocument.doc_id == question_id),
            SearchDocument.question_id == question_id,
        )
    ).delete(synchronize_session=False)
    db.session.commit()
    return removed


def remove_answer(answer_id: int) -> int:
    removed = SearchDocument.query.filter_by(doc_type=DOC_ANSWER, doc_id=answer_id).delete(
        synchronize_session=False
    )
    db.session.commit()
    return removed


def search(term: str, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
    pattern = f"%{term.strip()}%"
    query = SearchDocument.query.filter(
        or_(SearchDocument.title.ilike(pattern), SearchDocument.body.ilike(pattern))
    ).order_by(SearchDocument.updated_at.desc(), SearchDocument.id.desc())
    return paginate(query, page=page, per_page=per_page)
