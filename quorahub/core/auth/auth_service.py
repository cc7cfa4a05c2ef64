"""Authentication service layer."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func

from quorahub.core.auth.password import hash_password, verify_password
from quorahub.core.auth.schemas import RegisterRequest
from quorahub.core.auth.tokens import TokenStatus, token_provider
from quorahub.core.events.event_types import USER_SIGNED_UP
from quorahub.core.events.publisher import event_publisher
from quorahub.core.users.models import ROLE_USER, User
from quorahub.core.users.services import get_user_by_login
from quorahub.extensions import db

logger = logging.getLogger(__name__)


def register_user(payload: RegisterRequest) -> User:
    """Create a ROLE_USER account and announce it on user-events."""
    username = payload.username.strip()
    email = payload.email.strip().lower()
    if User.query.filter(User.username == username).first():
        raise ValueError("username_taken")
    if User.query.filter(func.lower(User.email) == email).first():
        raise ValueError("email_taken")

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=ROLE_USER,
    )
    db.session.add(user)
    db.session.commit()
    logger.info("User registered: %s", user.id)
    event_publisher.publish_user_event(USER_SIGNED_UP, user.id, user.username, user.email)
    return user


def authenticate_user(username_or_email: str, password: str) -> Optional[User]:
    user = get_user_by_login(username_or_email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_tokens(user: User) -> dict:
    return {
        "access_token": token_provider.generate_access_token(user.id, user.username),
        "refresh_token": token_provider.generate_refresh_token(user.id),
        "token_type": "Bearer",
        "expires_in": int(token_provider.access_ttl.total_seconds()),
    }


def refresh_tokens(refresh_token: str) -> tuple[User, dict]:
    """Exchange a refresh token for a fresh pair; raises ValueError("invalid_token")."""
    status = token_provider.classify(refresh_token)
    if status is not TokenStatus.VALID:
        logger.info("Refresh rejected: %s", status.value)
        raise ValueError("invalid_token")
    if not token_provider.is_refresh_token(refresh_token):
        logger.info("Refresh rejected: access token presented")
        raise ValueError("invalid_token")
    user = db.session.get(User, token_provider.extract_subject(refresh_token))
    if not user or not user.is_active:
        raise ValueError("invalid_token")
    return user, issue_tokens(user)
