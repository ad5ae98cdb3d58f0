"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Email registration request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    display_name: str | None = Field(None, min_length=2, max_length=64)
    referred_by_id: int | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class LoginRequest(BaseModel):
    """Login with email + password."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserResponse(BaseModel):
    """Authenticated user's own profile."""

    id: int
    email: str
    display_name: str | None = None
    role: Literal["recruit", "volunteer", "admin"] = "recruit"
    points: int = 0
    donation_points: int = 0
    has_applied: bool = False
    avatar_url: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    """Token response returned after successful auth."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    user: UserResponse
