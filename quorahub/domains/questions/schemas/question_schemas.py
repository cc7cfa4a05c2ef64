"""Question schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class QuestionCreate(BaseModel):
    title: str = Field(min_length=5, max_length=500)
    content: str = Field(min_length=1, max_length=20000)
    tag_ids: List[int] = Field(default_factory=list, max_length=10)

    @field_validator("tag_ids")
    @classmethod
    def _unique_tags(cls, value: List[int]) -> List[int]:
        return list(dict.fromkeys(value))


class QuestionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=5, max_length=500)
    content: Optional[str] = Field(default=None, min_length=1, max_length=20000)
    tag_ids: Optional[List[int]] = Field(default=None, max_length=10)

    @field_validator("tag_ids")
    @classmethod
    def _unique_tags(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        return list(dict.fromkeys(value)) if value is not None else None
