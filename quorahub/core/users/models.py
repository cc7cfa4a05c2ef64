"""User model and tag-follow association."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorahub.core.utils.mixins import TimestampMixin
from quorahub.extensions import db

if TYPE_CHECKING:
    from quorahub.domains.answers.models.answer_models import Answer
    from quorahub.domains.comments.models.comment_models import Comment
    from quorahub.domains.questions.models.question_models import Question
    from quorahub.domains.tags.models.tag_models import Tag

ROLE_USER = "ROLE_USER"
ROLE_MODERATOR = "ROLE_MODERATOR"
ROLE_ADMIN = "ROLE_ADMIN"
ROLES = (ROLE_USER, ROLE_MODERATOR, ROLE_ADMIN)

user_tags = db.Table(
    "user_tags",
    db.Column("user_id", db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class User(db.Model, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(db.String(255), nullable=False)
    first_name: Mapped[str | None] = mapped_column(db.String(100))
    last_name: Mapped[str | None] = mapped_column(db.String(100))
    bio: Mapped[str | None] = mapped_column(db.Text)
    role: Mapped[str] = mapped_column(db.String(32), nullable=False, default=ROLE_USER)
    is_active: Mapped[bool] = mapped_column(default=True)

    followed_tags: Mapped[list["Tag"]] = relationship(
        "Tag", secondary=user_tags, back_populates="followers"
    )
    questions: Mapped[list["Question"]] = relationship(
        "Question", back_populates="author", cascade="all, delete"
    )
    answers: Mapped[list["Answer"]] = relationship("Answer", back_populates="author", cascade="all, delete")
    comments: Mapped[list["Comment"]] = relationship("Comment", back_populates="author", cascade="all, delete")
    liked_questions: Mapped[list["Question"]] = relationship(
        "Question", secondary="question_likes", back_populates="liked_by"
    )
    liked_answers: Mapped[list["Answer"]] = relationship(
        "Answer", secondary="answer_likes", back_populates="liked_by"
    )
    liked_comments: Mapped[list["Comment"]] = relationship(
        "Comment", secondary="comment_likes", back_populates="liked_by"
    )

    @property
    def full_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else None
