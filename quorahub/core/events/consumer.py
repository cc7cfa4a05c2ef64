"""Domain event consumer.

One handler table per channel, keyed on ``eventType``. Messages with an
unknown type are logged and dropped. Notification and audit messages carry
no type and go to a single handler each.

Delivery is at-least-once and nothing here deduplicates: a redelivered
message runs its side effects again. A handler that raises, or a payload
that does not parse, is logged and dropped; there is no retry and no
dead-letter channel.
"""

from __future__ import annotations

import json
import logging
from typing import Callable, Dict, Optional, Union

from pydantic import ValidationError

from quorahub.core.audit.services import record_audit
from quorahub.core.events.event_models import (
    EVENT_MODELS,
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
    ANSWER_DELETED,
    ANSWER_EVENTS,
    ANSWER_LIKED,
    ANSWER_MARKED_ACCEPTED,
    ANSWER_UNLIKED,
    ANSWER_UNMARKED_ACCEPTED,
    ANSWER_UPDATED,
    AUDIT_CREATE,
    AUDIT_LOG_EVENTS,
    ENGAGEMENT_EVENTS,
    NOTIFICATION_EVENTS,
    NOTIFY_ANSWER_ACCEPTED,
    NOTIFY_ANSWER_LIKED,
    NOTIFY_NEW_ANSWER,
    NOTIFY_NEW_COMMENT,
    NOTIFY_NEW_QUESTION_IN_TAG,
    NOTIFY_QUESTION_LIKED,
    NOTIFY_WELCOME,
    QUESTION_CREATED,
    QUESTION_DELETED,
    QUESTION_EDITED,
    QUESTION_EVENTS,
    QUESTION_LIKED,
    QUESTION_UNLIKED,
    RESOURCE_COMMENT,
    USER_EVENTS,
    USER_FOLLOWED_TAG,
    USER_PROFILE_UPDATED,
    USER_SIGNED_UP,
    USER_UNFOLLOWED_TAG,
)
from quorahub.core.events.publisher import EventPublisher, event_publisher
from quorahub.core.notifications.services import record_notification
from quorahub.core.search import services as search
from quorahub.core.users.models import User, user_tags
from quorahub.domains.answers.models.answer_models import Answer
from quorahub.domains.comments.models.comment_models import Comment
from quorahub.domains.questions.models.question_models import Question, question_tags
from quorahub.extensions import db

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class EventConsumer:
    def __init__(self, publisher: Optional[EventPublisher] = None) -> None:
        self.publisher = publisher or event_publisher
        self._typed: Dict[str, Dict[str, Handler]] = {
            USER_EVENTS: {
                USER_SIGNED_UP: self.on_user_signed_up,
                USER_PROFILE_UPDATED: self.on_user_profile_updated,
            },
            QUESTION_EVENTS: {
                QUESTION_CREATED: self.on_question_created,
                QUESTION_EDITED: self.on_question_edited,
                QUESTION_DELETED: self.on_question_deleted,
            },
            ANSWER_EVENTS: {
                ANSWER_CREATED: self.on_answer_created,
                ANSWER_UPDATED: self.on_answer_updated,
                ANSWER_DELETED: self.on_answer_deleted,
                ANSWER_MARKED_ACCEPTED: self.on_answer_accepted,
                ANSWER_UNMARKED_ACCEPTED: self.on_answer_unaccepted,
                ANSWER_LIKED: self.on_answer_liked,
                ANSWER_UNLIKED: self.on_answer_unliked,
            },
            ENGAGEMENT_EVENTS: {
                USER_FOLLOWED_TAG: self.on_tag_follow_changed,
                USER_UNFOLLOWED_TAG: self.on_tag_follow_changed,
                QUESTION_LIKED: self.on_question_liked,
                QUESTION_UNLIKED: self.on_question_unliked,
            },
        }
        self._untyped: Dict[str, Handler] = {
            NOTIFICATION_EVENTS: self.on_notification,
            AUDIT_LOG_EVENTS: self.on_audit_log,
        }

    @property
    def channels(self):
        return tuple(self._typed) + tuple(self._untyped)

    def handle(self, channel: str, raw: Union[str, bytes]) -> bool:
        """Process one message; returns True when a handler ran to completion."""
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError):
            logger.error("Dropping unparseable message on %s", channel)
            return False
        if not isinstance(payload, dict):
            logger.error("Dropping non-object message on %s", channel)
            return False

        handler = self._untyped.get(channel)
        if handler is None:
            table = self._typed.get(channel)
            if table is None:
                logger.warning("No listener registered for channel %s", channel)
                return False
            event_type = payload.get("eventType")
            handler = table.get(event_type)
            if handler is None:
                logger.warning("Unknown event type on %s: %s", channel, event_type)
                return False

        try:
            event = EVENT_MODELS[channel].model_validate(payload)
        except ValidationError as exc:
            logger.error("Dropping invalid %s payload: %s", channel, exc.errors(include_url=False))
            return False

        try:
            handler(event)
        except Exception:
            db.session.rollback()
            logger.exception("Handler failed for %s on %s", getattr(event, "event_type", type(event).__name__), channel)
            return False
        return True

    def _notify(self, user_id: Optional[int], notification_type: str, message: str) -> None:
        if user_id is None:
            return
        self.publisher.publish_notification(user_id, notification_type, message)

    # --- user-events ---

    def on_user_signed_up(self, event: UserEvent) -> None:
        logger.info("User signed up: %s", event.user_id)
        name = event.username or "there"
        self._notify(event.user_id, NOTIFY_WELCOME, f"Welcome to QuoraHub, {name}!")

    def on_user_profile_updated(self, event: UserEvent) -> None:
        logger.info("User profile updated: %s", event.user_id)

    # --- question-events ---

    def on_question_created(self, event: QuestionEvent) -> None:
        logger.info("Question created: %s", event.question_id)
        doc = search.index_question(event.question_id)
        if doc is None:
            return
        follower_ids = (
            db.session.query(user_tags.c.user_id)
            .join(question_tags, question_tags.c.tag_id == user_tags.c.tag_id)
            .filter(question_tags.c.question_id == event.question_id)
            .distinct()
            .all()
        )
        title = doc.title or ""
        for (follower_id,) in sorted(follower_ids):
            if follower_id == event.user_id:
                continue
            self._notify(follower_id, NOTIFY_NEW_QUESTION_IN_TAG, f"New question in a tag you follow: {title}")

    def on_question_edited(self, event: QuestionEvent) -> None:
        logger.info("Question edited: %s", event.question_id)
        search.index_question(event.question_id)

    def on_question_deleted(self, event: QuestionEvent) -> None:
        logger.info("Question deleted: %s", event.question_id)
        search.remove_question(event.question_id)

    # --- answer-events ---

    def on_answer_created(self, event: AnswerEvent) -> None:
        logger.info("Answer created: %s on question %s", event.answer_id, event.question_id)
        search.index_answer(event.answer_id)
        question = db.session.get(Question, event.question_id)
        if question is None or question.author_id == event.user_id:
            return
        self._notify(question.author_id, NOTIFY_NEW_ANSWER, f"Your question has a new answer: {question.title}")

    def on_answer_updated(self, event: AnswerEvent) -> None:
        logger.info("Answer updated: %s", event.answer_id)
        search.index_answer(event.answer_id)

    def on_answer_deleted(self, event: AnswerEvent) -> None:
        logger.info("Answer deleted: %s", event.answer_id)
        search.remove_answer(event.answer_id)

    def on_answer_accepted(self, event: AnswerEvent) -> None:
        logger.info("Answer accepted: %s", event.answer_id)
        answer = db.session.get(Answer, event.answer_id)
        if answer is None or answer.author_id == event.user_id:
            return
        self._notify(answer.author_id, NOTIFY_ANSWER_ACCEPTED, "Your answer was accepted")

    def on_answer_unaccepted(self, event: AnswerEvent) -> None:
        logger.info("Answer acceptance withdrawn: %s", event.answer_id)

    def on_answer_liked(self, event: AnswerEvent) -> None:
        answer = db.session.get(Answer, event.answer_id)
        if answer is None or answer.author_id == event.user_id:
            return
        liker = db.session.get(User, event.user_id) if event.user_id else None
        who = liker.username if liker else "Someone"
        self._notify(answer.author_id, NOTIFY_ANSWER_LIKED, f"{who} liked your answer")

    def on_answer_unliked(self, event: AnswerEvent) -> None:
        logger.debug("Answer unliked: %s by %s", event.answer_id, event.user_id)

    # --- engagement-events ---

    def on_tag_follow_changed(self, event: EngagementEvent) -> None:
        # Feed personalization would hook in here.
        logger.info("%s: user %s tag %s", event.event_type, event.user_id, event.tag_name or event.tag_id)

    def on_question_liked(self, event: EngagementEvent) -> None:
        if event.question_id is None:
            return
        question = db.session.get(Question, event.question_id)
        if question is None or question.author_id == event.user_id:
            return
        liker = db.session.get(User, event.user_id)
        who = liker.username if liker else "Someone"
        self._notify(question.author_id, NOTIFY_QUESTION_LIKED, f"{who} liked your question: {question.title}")

    def on_question_unliked(self, event: EngagementEvent) -> None:
        logger.debug("Question unliked: %s by %s", event.question_id, event.user_id)

    # --- notification-events / audit-log-events ---

    def on_notification(self, event: NotificationEvent) -> None:
        record_notification(event.user_id, event.notification_type, event.message)

    def on_audit_log(self, event: AuditLogEvent) -> None:
        record_audit(event.user_id, event.action, event.resource_type, event.resource_id, event.details)
        if event.action == AUDIT_CREATE and event.resource_type == RESOURCE_COMMENT and event.resource_id:
            comment = db.session.get(Comment, event.resource_id)
            if comment is None or comment.answer.author_id == event.user_id:
                return
            self._notify(comment.answer.author_id, NOTIFY_NEW_COMMENT, "Someone commented on your answer")


event_consumer = EventConsumer()
