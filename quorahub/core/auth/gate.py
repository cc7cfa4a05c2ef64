"""Per-request bearer token authentication.

The gate only ever attaches a principal; it never rejects a request. A
missing header, a bad token or a lookup failure all leave the request
anonymous, and route decorators decide whether anonymous is acceptable.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from quorahub.core.auth.principal import UserPrincipal
from quorahub.core.auth.tokens import REFRESH_TYPE, TokenProvider, token_provider
from quorahub.core.users.models import User
from quorahub.extensions import db

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value or not header_value.startswith(BEARER_PREFIX):
        return None
    token = header_value[len(BEARER_PREFIX):].strip()
    return token or None


def load_principal(user_id: int) -> Optional[UserPrincipal]:
    user = db.session.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return UserPrincipal.from_user(user)


class AuthenticationGate:
    def __init__(
        self,
        provider: Optional[TokenProvider] = None,
        principal_loader: Callable[[int], Optional[UserPrincipal]] = load_principal,
    ) -> None:
        self.provider = provider or token_provider
        self.principal_loader = principal_loader

    def authenticate(self, request) -> Optional[UserPrincipal]:
        try:
            token = extract_bearer_token(request.headers.get("Authorization"))
            if token is None or not self.provider.validate(token):
                return None
            claims = self.provider.extract_claims(token)
            if claims.get("type") == REFRESH_TYPE:
                logger.info("Refresh token presented as request credential; ignoring")
                return None
            return self.principal_loader(int(claims["sub"]))
        except Exception:
            logger.exception("Could not set user authentication for request")
            return None


authentication_gate = AuthenticationGate()
