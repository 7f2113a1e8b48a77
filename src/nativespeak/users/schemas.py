"""Request/response schemas for profile and counter endpoints."""

from __future__ import annotations

from pydantic import Field

from nativespeak.auth.schemas import UserResponse
from nativespeak.schemas import CamelModel

# Upper bound for a single credit or time increment
INT32_MAX = 2**31 - 1


class ProfileUpdateRequest(CamelModel):
    """Partial profile update. Omitted fields are left unchanged."""

    avatar: str | None = Field(None, max_length=512)
    theme: str | None = Field(None, min_length=1, max_length=32)


class ProfileResponse(CamelModel):
    success: bool = True
    message: str
    user: UserResponse


class CreditsAdjustRequest(CamelModel):
    """Signed credit delta. Negative values spend credits; any overdraft clamps to zero."""

    amount: int = Field(..., le=INT32_MAX)


class CreditsResponse(CamelModel):
    success: bool = True
    message: str
    credits: int


class ConversationTimeRequest(CamelModel):
    seconds: int = Field(..., gt=0, le=INT32_MAX)


class ConversationTimeResponse(CamelModel):
    success: bool = True
    message: str
    total_conversation_time: int


class CompletedLessonsResponse(CamelModel):
    success: bool = True
    message: str
    completed_lessons: int
