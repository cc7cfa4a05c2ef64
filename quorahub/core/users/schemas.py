"""Typed schemas for user IO."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

if TYPE_CHECKING:
    from quorahub.core.users.models import User


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=4096)


class PasswordChangeRequest(BaseModel):
    old_password: str = Field(min_length=1, validation_alias=AliasChoices("old_password", "oldPassword"))
    new_password: str = Field(
        min_length=8, max_length=128, validation_alias=AliasChoices("new_password", "newPassword")
    )


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    role: str
    is_active: bool
    created_at: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


def serialize_user(user: "User") -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        bio=user.bio,
        role=user.role,
        is_active=user.is_active,
        created_at=user.created_at.isoformat() if user.created_at else None,
    )
