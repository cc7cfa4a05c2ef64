"""Tag model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Mapped, mapped_column, relationship

from quorahub.core.users.models import user_tags
from quorahub.core.utils.mixins import TimestampMixin
from quorahub.domains.questions.models.question_models import question_tags
from quorahub.extensions import db

if TYPE_CHECKING:
    from quorahub.core.users.models import User
    from quorahub.domains.questions.models.question_models import Question


class Tag(db.Model, TimestampMixin):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(64), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(db.String(500))
    follower_count: Mapped[int] = mapped_column(default=0)
    question_count: Mapped[int] = mapped_column(default=0)

    questions: Mapped[list["Question"]] = relationship("Question", secondary=question_tags, back_populates="tags")
    followers: Mapped[list["User"]] = relationship("User", secondary=user_tags, back_populates="followed_tags")
