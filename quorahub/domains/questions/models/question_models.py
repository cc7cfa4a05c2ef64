"""Question model with tag and like associations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorahub.core.utils.mixins import TimestampMixin
from quorahub.extensions import db

if TYPE_CHECKING:
    from quorahub.core.users.models import User
    from quorahub.domains.answers.models.answer_models import Answer
    from quorahub.domains.tags.models.tag_models import Tag

question_tags = db.Table(
    "question_tags",
    db.Column("question_id", db.ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True),
)

question_likes = db.Table(
    "question_likes",
    db.Column("question_id", db.ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Question(db.Model, TimestampMixin):
    __tablename__ = "questions"
    __table_args__ = (db.Index("ix_questions_author_created_at", "author_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(db.String(500), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    author_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    view_count: Mapped[int] = mapped_column(default=0)
    like_count: Mapped[int] = mapped_column(default=0)

    author: Mapped["User"] = relationship("User", back_populates="questions")
    tags: Mapped[list["Tag"]] = relationship("Tag", secondary=question_tags, back_populates="questions")
    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete",
        order_by="Answer.created_at",
    )
    liked_by: Mapped[list["User"]] = relationship(
        "User", secondary=question_likes, back_populates="liked_questions"
    )

    @property
    def answer_count(self) -> int:
        return len(self.answers)
