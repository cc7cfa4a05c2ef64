"""Channel and event-type catalog for domain events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet

# Channels (one per aggregate category)
USER_EVENTS = "user-events"
QUESTION_EVENTS = "question-events"
ANSWER_EVENTS = "answer-events"
ENGAGEMENT_EVENTS = "engagement-events"
NOTIFICATION_EVENTS = "notification-events"
AUDIT_LOG_EVENTS = "audit-log-events"

# user-events
USER_SIGNED_UP = "USER_SIGNED_UP"
USER_PROFILE_UPDATED = "USER_PROFILE_UPDATED"

# question-events
QUESTION_CREATED = "QUESTION_CREATED"
QUESTION_EDITED = "QUESTION_EDITED"
QUESTION_DELETED = "QUESTION_DELETED"

# answer-events
ANSWER_CREATED = "ANSWER_CREATED"
ANSWER_UPDATED = "ANSWER_UPDATED"
ANSWER_DELETED = "ANSWER_DELETED"
ANSWER_MARKED_ACCEPTED = "ANSWER_MARKED_ACCEPTED"
ANSWER_UNMARKED_ACCEPTED = "ANSWER_UNMARKED_ACCEPTED"
ANSWER_LIKED = "ANSWER_LIKED"
ANSWER_UNLIKED = "ANSWER_UNLIKED"

# engagement-events
USER_FOLLOWED_TAG = "USER_FOLLOWED_TAG"
USER_UNFOLLOWED_TAG = "USER_UNFOLLOWED_TAG"
QUESTION_LIKED = "QUESTION_LIKED"
QUESTION_UNLIKED = "QUESTION_UNLIKED"

USER_EVENT_TYPES: FrozenSet[str] = frozenset({USER_SIGNED_UP, USER_PROFILE_UPDATED})
QUESTION_EVENT_TYPES: FrozenSet[str] = frozenset({QUESTION_CREATED, QUESTION_EDITED, QUESTION_DELETED})
ANSWER_EVENT_TYPES: FrozenSet[str] = frozenset(
    {
        ANSWER_CREATED,
        ANSWER_UPDATED,
        ANSWER_DELETED,
        ANSWER_MARKED_ACCEPTED,
        ANSWER_UNMARKED_ACCEPTED,
        ANSWER_LIKED,
        ANSWER_UNLIKED,
    }
)
ENGAGEMENT_EVENT_TYPES: FrozenSet[str] = frozenset(
    {USER_FOLLOWED_TAG, USER_UNFOLLOWED_TAG, QUESTION_LIKED, QUESTION_UNLIKED}
)

# notification-events: notificationType values
NOTIFY_WELCOME = "WELCOME"
NOTIFY_NEW_ANSWER = "NEW_ANSWER"
NOTIFY_ANSWER_ACCEPTED = "ANSWER_ACCEPTED"
NOTIFY_ANSWER_LIKED = "ANSWER_LIKED"
NOTIFY_QUESTION_LIKED = "QUESTION_LIKED"
NOTIFY_NEW_QUESTION_IN_TAG = "NEW_QUESTION_IN_TAG"
NOTIFY_NEW_COMMENT = "NEW_COMMENT"

# audit-log-events: action / resourceType values
AUDIT_CREATE = "CREATE"
AUDIT_UPDATE = "UPDATE"
AUDIT_DELETE = "DELETE"
AUDIT_LIKE = "LIKE"
AUDIT_UNLIKE = "UNLIKE"

RESOURCE_USER = "USER"
RESOURCE_TAG = "TAG"
RESOURCE_COMMENT = "COMMENT"

_SEVEN_DAYS_MS = 7 * 24 * 60 * 60 * 1000
_THIRTY_DAYS_MS = 30 * 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class TopicSpec:
    """Broker-side settings for a channel."""

    name: str
    partitions: int
    replicas: int
    retention_ms: int


TOPICS: Dict[str, TopicSpec] = {
    USER_EVENTS: TopicSpec(USER_EVENTS, 3, 1, _SEVEN_DAYS_MS),
    QUESTION_EVENTS: TopicSpec(QUESTION_EVENTS, 5, 1, _SEVEN_DAYS_MS),
    ANSWER_EVENTS: TopicSpec(ANSWER_EVENTS, 5, 1, _SEVEN_DAYS_MS),
    ENGAGEMENT_EVENTS: TopicSpec(ENGAGEMENT_EVENTS, 3, 1, _SEVEN_DAYS_MS),
    NOTIFICATION_EVENTS: TopicSpec(NOTIFICATION_EVENTS, 3, 1, _SEVEN_DAYS_MS),
    AUDIT_LOG_EVENTS: TopicSpec(AUDIT_LOG_EVENTS, 1, 1, _THIRTY_DAYS_MS),
}

ALL_CHANNELS = tuple(TOPICS)
