"""Signed bearer token issuing and verification.

Tokens are compact HS512 JWTs carrying ``sub`` (user id as a string), ``iat``
and ``exp``. Access tokens add ``username``; refresh tokens add
``type=refresh`` and nothing else. Verification needs only the signing key:
no token store, no revocation list.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

import jwt

logger = logging.getLogger(__name__)

# HS512 wants a key at least as long as its digest.
MIN_KEY_BYTES = 64
REFRESH_TYPE = "refresh"


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenStatus(str, Enum):
    ISSUED = "issued"
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenProvider:
    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: str = "HS512",
        access_ttl: timedelta = timedelta(hours=24),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock
        self._secret_key: Optional[bytes] = None
        if secret_key is not None:
            self.set_secret_key(secret_key)

    def init_app(self, app) -> None:
        self.algorithm = app.config.get("JWT_ALGORITHM", "HS512")
        self.access_ttl = app.config.get("JWT_ACCESS_TOKEN_EXPIRES", self.access_ttl)
        self.refresh_ttl = app.config.get("JWT_REFRESH_TOKEN_EXPIRES", self.refresh_ttl)
        self.set_secret_key(app.config["JWT_SECRET_KEY"])
        app.extensions["token_provider"] = self

    def set_secret_key(self, secret_key) -> None:
        key = secret_key.encode("utf-8") if isinstance(secret_key, str) else bytes(secret_key)
        if len(key) < MIN_KEY_BYTES:
            logger.warning(
                "JWT signing key is %s bytes; %s needs at least %s",
                len(key),
                self.algorithm,
                MIN_KEY_BYTES,
            )
        self._secret_key = key

    @property
    def secret_key(self) -> bytes:
        if self._secret_key is None:
            raise RuntimeError("TokenProvider has no signing key; call init_app first")
        return self._secret_key

    def ttl(self, kind: TokenKind) -> timedelta:
        return self.refresh_ttl if kind == TokenKind.REFRESH else self.access_ttl

    # --- issuing ---

    def generate(self, subject_id: int, username: Optional[str] = None, kind: TokenKind = TokenKind.ACCESS) -> str:
        issued_at = self.clock()
        claims: Dict[str, Any] = {
            "sub": str(subject_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl(kind),
        }
        if kind == TokenKind.REFRESH:
            claims["type"] = REFRESH_TYPE
        else:
            claims["username"] = username
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def generate_access_token(self, subject_id: int, username: str) -> str:
        return self.generate(subject_id, username, TokenKind.ACCESS)

    def generate_refresh_token(self, subject_id: int) -> str:
        return self.generate(subject_id, kind=TokenKind.REFRESH)

    # --- verification ---

    def _decode(self, token) -> Dict[str, Any]:
        return jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "iat", "exp"]},
        )

    def classify(self, token) -> TokenStatus:
        """Evaluate ``token`` from scratch; never raises."""
        if not isinstance(token, (str, bytes)) or not token:
            return TokenStatus.MALFORMED
        try:
            self._decode(token)
        except jwt.ExpiredSignatureError:
            return TokenStatus.EXPIRED
        except jwt.InvalidSignatureError:
            return TokenStatus.INVALID
        except jwt.InvalidAlgorithmError:
            return TokenStatus.UNSUPPORTED
        except jwt.DecodeError:
            return TokenStatus.MALFORMED
        except jwt.InvalidTokenError:
            return TokenStatus.INVALID
        except Exception:
            logger.debug("Unexpected failure decoding token", exc_info=True)
            return TokenStatus.MALFORMED
        return TokenStatus.VALID

    def validate(self, token) -> bool:
        status = self.classify(token)
        if status is TokenStatus.VALID:
            return True
        if status is TokenStatus.EXPIRED:
            logger.info("Expired JWT token")
        elif status is TokenStatus.INVALID:
            logger.info("Invalid JWT signature or claims")
        elif status is TokenStatus.UNSUPPORTED:
            logger.info("Unsupported JWT token")
        else:
            logger.info("Malformed JWT token")
        return False

    # Readers below assume the caller validated first; they raise jwt errors otherwise.

    def extract_claims(self, token) -> Dict[str, Any]:
        return self._decode(token)

    def extract_subject(self, token) -> int:
        return int(self._decode(token)["sub"])

    def extract_username(self, token) -> Optional[str]:
        return self._decode(token).get("username")

    def is_refresh_token(self, token) -> bool:
        return self._decode(token).get("type") == REFRESH_TYPE


# Global singleton
token_provider = TokenProvider()
