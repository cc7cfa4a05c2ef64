"""Answer model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorahub.core.utils.mixins import TimestampMixin
from quorahub.extensions import db

if TYPE_CHECKING:
    from quorahub.core.users.models import User
    from quorahub.domains.comments.models.comment_models import Comment
    from quorahub.domains.questions.models.question_models import Question

answer_likes = db.Table(
    "answer_likes",
    db.Column("answer_id", db.ForeignKey("answers.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Answer(db.Model, TimestampMixin):
    __tablename__ = "answers"
    __table_args__ = (db.Index("ix_answers_question_created_at", "question_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    question_id: Mapped[int] = mapped_column(
        db.ForeignKey("questions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    author_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    like_count: Mapped[int] = mapped_column(default=0)
    is_accepted: Mapped[bool] = mapped_column(default=False)

    question: Mapped["Question"] = relationship("Question", back_populates="answers")
    author: Mapped["User"] = relationship("User", back_populates="answers")
    comments: Mapped[list["Comment"]] = relationship("Comment", back_populates="answer", cascade="all, delete")
    liked_by: Mapped[list["User"]] = relationship("User", secondary=answer_likes, back_populates="liked_answers")

    @property
    def comment_count(self) -> int:
        return len(self.comments)
