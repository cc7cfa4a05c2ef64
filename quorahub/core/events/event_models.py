"""Typed domain event payloads.

Every event is an immutable pydantic model serialized with camelCase field
names, which is the wire contract consumers on the other side of the broker
rely on. Events carrying an ``eventType`` reject values outside their
category at construction time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from quorahub.core.events.event_types import (
    ANSWER_EVENT_TYPES,
    ANSWER_EVENTS,
    AUDIT_LOG_EVENTS,
    ENGAGEMENT_EVENT_TYPES,
    ENGAGEMENT_EVENTS,
    NOTIFICATION_EVENTS,
    QUESTION_EVENT_TYPES,
    QUESTION_EVENTS,
    USER_EVENT_TYPES,
    USER_EVENTS,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    channel: ClassVar[str] = ""

    timestamp: datetime = Field(default_factory=utcnow)

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_json(cls, raw: Union[str, bytes]):
        return cls.model_validate_json(raw)


class TypedDomainEvent(DomainEvent):
    """Event demultiplexed by consumers on its ``eventType``."""

    event_types: ClassVar[FrozenSet[str]] = frozenset()

    event_type: str

    @field_validator("event_type")
    @classmethod
    def _known_event_type(cls, value: str) -> str:
        if value not in cls.event_types:
            raise ValueError(f"unsupported event type {value!r} for {cls.__name__}")
        return value


class UserEvent(TypedDomainEvent):
    channel: ClassVar[str] = USER_EVENTS
    event_types: ClassVar[FrozenSet[str]] = USER_EVENT_TYPES

    user_id: int
    username: Optional[str] = None
    email: Optional[str] = None


class QuestionEvent(TypedDomainEvent):
    channel: ClassVar[str] = QUESTION_EVENTS
    event_types: ClassVar[FrozenSet[str]] = QUESTION_EVENT_TYPES

    question_id: int
    user_id: Optional[int] = None
    title: Optional[str] = None


class AnswerEvent(TypedDomainEvent):
    channel: ClassVar[str] = ANSWER_EVENTS
    event_types: ClassVar[FrozenSet[str]] = ANSWER_EVENT_TYPES

    answer_id: int
    question_id: int
    user_id: Optional[int] = None


class EngagementEvent(TypedDomainEvent):
    channel: ClassVar[str] = ENGAGEMENT_EVENTS
    event_types: ClassVar[FrozenSet[str]] = ENGAGEMENT_EVENT_TYPES

    user_id: int
    question_id: Optional[int] = None
    tag_id: Optional[int] = None
    tag_name: Optional[str] = None


class NotificationEvent(DomainEvent):
    channel: ClassVar[str] = NOTIFICATION_EVENTS

    user_id: int
    notification_type: str
    message: str


class AuditLogEvent(DomainEvent):
    channel: ClassVar[str] = AUDIT_LOG_EVENTS

    user_id: Optional[int] = None
    action: str
    resource_type: str
    resource_id: Optional[int] = None
    details: Optional[str] = None


EVENT_MODELS = {
    USER_EVENTS: UserEvent,
    QUESTION_EVENTS: QuestionEvent,
    ANSWER_EVENTS: AnswerEvent,
    ENGAGEMENT_EVENTS: EngagementEvent,
    NOTIFICATION_EVENTS: NotificationEvent,
    AUDIT_LOG_EVENTS: AuditLogEvent,
}
