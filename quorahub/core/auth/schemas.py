"""Auth request/response schemas."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    username_or_email: str = Field(
        min_length=1,
        validation_alias=AliasChoices("username_or_email", "usernameOrEmail", "username", "email"),
    )
    password: str = Field(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1, validation_alias=AliasChoices("refresh_token", "refreshToken"))
