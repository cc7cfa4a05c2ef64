"""Answer schemas."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class AnswerCreate(BaseModel):
    question_id: int = Field(gt=0, validation_alias=AliasChoices("question_id", "questionId"))
    content: str = Field(min_length=1, max_length=20000)


class AnswerUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=20000)
