"""Comment model with reply threads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorahub.core.utils.mixins import TimestampMixin
from quorahub.extensions import db

if TYPE_CHECKING:
    from quorahub.core.users.models import User
    from quorahub.domains.answers.models.answer_models import Answer

comment_likes = db.Table(
    "comment_likes",
    db.Column("comment_id", db.ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Comment(db.Model, TimestampMixin):
    __tablename__ = "comments"
    __table_args__ = (db.Index("ix_comments_answer_created_at", "answer_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    answer_id: Mapped[int] = mapped_column(db.ForeignKey("answers.id", ondelete="CASCADE"), index=True, nullable=False)
    parent_id: Mapped[int | None] = mapped_column(db.ForeignKey("comments.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[int] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    like_count: Mapped[int] = mapped_column(default=0)

    answer: Mapped["Answer"] = relationship("Answer", back_populates="comments")
    author: Mapped["User"] = relationship("User", back_populates="comments")
    parent: Mapped[Optional["Comment"]] = relationship("Comment", remote_side=[id], back_populates="replies")
    replies: Mapped[list["Comment"]] = relationship("Comment", back_populates="parent", cascade="all, delete")
    liked_by: Mapped[list["User"]] = relationship("User", secondary=comment_likes, back_populates="liked_comments")

    @property
    def reply_count(self) -> int:
        return len(self.replies)
