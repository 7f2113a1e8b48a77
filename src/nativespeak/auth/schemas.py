"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from nativespeak.schemas import CamelModel


def _normalize_email(v: str) -> str:
    return v.lower().strip()


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    """Email registration request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return _normalize_email(v)


class LoginRequest(CamelModel):
    """Login with email + password."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return _normalize_email(v)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UserResponse(CamelModel):
    """Account projection. Never carries the password hash."""

    id: str
    email: str
    first_name: str
    last_name: str
    avatar: str | None = None
    theme: str | None = None
    credits: int = 0
    total_conversation_time: int = 0
    completed_lessons: int = 0
    terms_accepted: bool = False
    study_start_date: datetime | None = None


class AuthResponse(CamelModel):
    """Returned after successful registration or login."""

    success: bool = True
    message: str
    user: UserResponse
    token: str


class MeResponse(CamelModel):
    success: bool = True
    user: UserResponse


class AcceptTermsResponse(CamelModel):
    success: bool = True
    message: str
    user: UserResponse
