"""Comment schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class CommentCreate(BaseModel):
    answer_id: int = Field(gt=0, validation_alias=AliasChoices("answer_id", "answerId"))
    parent_id: Optional[int] = Field(default=None, gt=0, validation_alias=AliasChoices("parent_id", "parentId"))
    content: str = Field(min_length=1, max_length=4096)


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=4096)
