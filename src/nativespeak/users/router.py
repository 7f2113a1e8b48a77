"""User management router: all /users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.auth.dependencies import AuthContext, get_auth_context
from nativespeak.auth.schemas import UserResponse
from nativespeak.database import get_session
from nativespeak.users.schemas import (
    CompletedLessonsResponse,
    ConversationTimeRequest,
    ConversationTimeResponse,
    CreditsAdjustRequest,
    CreditsResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from nativespeak.users.service import (
    add_conversation_time,
    adjust_credits,
    increment_completed_lessons,
    update_profile,
)

router = APIRouter(prefix="/users", tags=["Users"])


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@router.patch("/profile", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Update avatar and/or theme."""
    user = await update_profile(db, ctx.user_id, avatar=body.avatar, theme=body.theme)
    await db.commit()
    return ProfileResponse(message="Profile updated successfully", user=UserResponse.model_validate(user))


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


@router.patch("/credits", response_model=CreditsResponse)
async def update_credits(
    body: CreditsAdjustRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> CreditsResponse:
    """Add or spend credits. The balance never drops below zero."""
    credits = await adjust_credits(db, ctx.user_id, body.amount)
    await db.commit()
    return CreditsResponse(message="Credits updated", credits=credits)


@router.post("/conversation-time", response_model=ConversationTimeResponse)
async def add_my_conversation_time(
    body: ConversationTimeRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> ConversationTimeResponse:
    """Add seconds of conversation practice."""
    total = await add_conversation_time(db, ctx.user_id, body.seconds)
    await db.commit()
    return ConversationTimeResponse(message="Conversation time updated", total_conversation_time=total)


@router.post("/completed-lessons", response_model=CompletedLessonsResponse)
async def complete_lesson(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> CompletedLessonsResponse:
    """Record one more completed lesson."""
    completed = await increment_completed_lessons(db, ctx.user_id)
    await db.commit()
    return CompletedLessonsResponse(message="Completed lesson recorded", completed_lessons=completed)
