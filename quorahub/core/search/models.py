"""Denormalized search index rows maintained by event listeners."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from quorahub.extensions import db

DOC_QUESTION = "question"
DOC_ANSWER = "answer"


class SearchDocument(db.Model):
    __tablename__ = "search_document"
    __table_args__ = (db.UniqueConstraint("doc_type", "doc_id", name="uq_search_document_doc"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    doc_type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    doc_id: Mapped[int] = mapped_column(nullable=False)
    # Question id for answers, own id for questions; used to link results.
    question_id: Mapped[int] = mapped_column(index=True, nullable=False)
    title: Mapped[str | None] = mapped_column(db.String(500))
    body: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
