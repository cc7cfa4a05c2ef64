"""Request principal attached by the authentication gate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

from flask_login import UserMixin

from quorahub.core.users.models import User


@dataclass(frozen=True)
class UserPrincipal(UserMixin):
    id: int
    username: str
    email: str
    role: str
    authorities: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_user(cls, user: User) -> "UserPrincipal":
        # One authority per account: the stored role.
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            authorities=frozenset({user.role}),
        )

    def get_id(self) -> str:
        return str(self.id)

    def has_any_role(self, roles: Iterable[str]) -> bool:
        return bool(self.authorities.intersection(roles))
