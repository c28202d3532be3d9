"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Login with username + password."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class RegisterRequest(BaseModel):
    """Username registration. The security question backs a future password reset."""

    username: str = Field(..., min_length=3, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)
    security_question: str | None = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("securityQuestion", "security_question"),
    )
    security_answer: str | None = Field(
        None,
        max_length=255,
        validation_alias=AliasChoices("securityAnswer", "security_answer"),
    )

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        """Usernames never carry surrounding whitespace."""
        v = v.strip()
        if len(v) < 3:
            msg = "Username must be at least 3 characters"
            raise ValueError(msg)
        return v


class TokenUser(BaseModel):
    """Identity echoed back to the client on login."""

    id: int
    username: str
    is_admin: bool = Field(serialization_alias="isAdmin")


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: TokenUser


class RegisterResponse(BaseModel):
    success: bool = True
    user_id: int = Field(serialization_alias="userId")


class ProfileUser(BaseModel):
    id: int
    username: str
    created_at: datetime | None = None
