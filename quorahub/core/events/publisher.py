"""Domain event publisher.

Services call the publisher after their commit succeeded. Publishing is
fire-and-forget: the event is serialized and handed to the broker client,
failures are logged and swallowed, and nothing is retried here. An event can
therefore be lost after a successful mutation; there is no outbox tying the
two together.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from quorahub.core.events.event_models import (
    AnswerEvent,
    AuditLogEvent,
    DomainEvent,
    EngagementEvent,
    NotificationEvent,
    QuestionEvent,
    UserEvent,
)
from quorahub.core.events.event_types import (
    ANSWER_CREATED,
    ANSWER_EVENTS,
    ANSWER_MARKED_ACCEPTED,
    AUDIT_LOG_EVENTS,
    ENGAGEMENT_EVENTS,
    NOTIFICATION_EVENTS,
    QUESTION_EVENTS,
    USER_EVENTS,
)
from quorahub.platform.broker import Broker, InMemoryBroker, create_broker

logger = logging.getLogger(__name__)

PartitionKey = Union[int, str, None]


class EventPublisher:
    def __init__(self, broker: Optional[Broker] = None) -> None:
        self._broker = broker

    def init_app(self, app) -> None:
        self._broker = create_broker(app.config)
        app.extensions["event_publisher"] = self
        app.extensions["event_broker"] = self._broker

    @property
    def broker(self) -> Broker:
        if self._broker is None:
            # Unconfigured publishers (scripts, shells) keep events in-process.
            self._broker = InMemoryBroker()
        return self._broker

    def use_broker(self, broker: Broker) -> None:
        self._broker = broker

    def publish(self, channel: str, partition_key: PartitionKey, event: DomainEvent) -> bool:
        """Hand ``event`` to ``channel``; returns False when the hand-off failed."""
        key = str(partition_key) if partition_key is not None else None
        try:
            self.broker.send(channel, key, event.to_json())
        except Exception:
            logger.exception(
                "Error publishing %s to %s (key=%s)",
                getattr(event, "event_type", type(event).__name__),
                channel,
                key,
            )
            return False
        logger.info(
            "Published %s to %s (key=%s)",
            getattr(event, "event_type", type(event).__name__),
            channel,
            key,
        )
        return True

    # --- typed helpers ---

    def publish_user_event(self, event_type: str, user_id: int, username: str = None, email: str = None) -> bool:
        event = UserEvent(event_type=event_type, user_id=user_id, username=username, email=email)
        return self.publish(USER_EVENTS, user_id, event)

    def publish_question_event(self, event_type: str, question_id: int, user_id: int = None, title: str = None) -> bool:
        event = QuestionEvent(event_type=event_type, question_id=question_id, user_id=user_id, title=title)
        return self.publish(QUESTION_EVENTS, question_id, event)

    def publish_answer_event(self, event_type: str, answer_id: int, question_id: int, user_id: int = None) -> bool:
        event = AnswerEvent(event_type=event_type, answer_id=answer_id, question_id=question_id, user_id=user_id)
        return self.publish(ANSWER_EVENTS, answer_id, event)

    def publish_answer_created(self, answer_id: int, question_id: int, author_id: int) -> bool:
        return self.publish_answer_event(ANSWER_CREATED, answer_id, question_id, author_id)

    def publish_answer_accepted(self, answer_id: int, question_id: int, accepted_by: int) -> bool:
        return self.publish_answer_event(ANSWER_MARKED_ACCEPTED, answer_id, question_id, accepted_by)

    def publish_engagement_event(
        self,
        event_type: str,
        user_id: int,
        question_id: int = None,
        tag_id: int = None,
        tag_name: str = None,
    ) -> bool:
        event = EngagementEvent(
            event_type=event_type,
            user_id=user_id,
            question_id=question_id,
            tag_id=tag_id,
            tag_name=tag_name,
        )
        return self.publish(ENGAGEMENT_EVENTS, user_id, event)

    def publish_notification(self, user_id: int, notification_type: str, message: str) -> bool:
        event = NotificationEvent(user_id=user_id, notification_type=notification_type, message=message)
        return self.publish(NOTIFICATION_EVENTS, user_id, event)

    def publish_audit(
        self,
        user_id: Optional[int],
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> bool:
        event = AuditLogEvent(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
        )
        return self.publish(AUDIT_LOG_EVENTS, user_id, event)


# Global singleton
event_publisher = EventPublisher()
