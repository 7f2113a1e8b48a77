"""User profile and counter mutations.

Every read-modify-write here is a single ``UPDATE ... RETURNING`` so
concurrent requests for the same account serialize on the row inside the
database and no increment is lost.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import case, update

from nativespeak.auth.service import require_user
from nativespeak.db.models import User
from nativespeak.errors import NotFound

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

# Smallest delta a bigint parameter can carry; anything lower clamps the same way
_MIN_CREDIT_DELTA = -(2**63 - 1)


def _user_not_found() -> NotFound:
    return NotFound("User not found")


async def update_profile(
    db: AsyncSession,
    user_id: str,
    avatar: str | None = None,
    theme: str | None = None,
) -> User:
    """Update display attributes. Only provided fields change."""
    values: dict[str, Any] = {}
    if avatar is not None:
        values["avatar"] = avatar
    if theme is not None:
        values["theme"] = theme

    if not values:
        return await require_user(db, user_id)

    result = await db.execute(update(User).where(User.id == user_id).values(**values).returning(User))
    user = result.scalar_one_or_none()
    if user is None:
        raise _user_not_found()

    logger.info("profile_updated", user_id=user_id, fields=sorted(values))
    return user


async def adjust_credits(db: AsyncSession, user_id: str, amount: int) -> int:
    """
    Add a signed delta to the credit balance, clamping at zero.

    Returns:
        The new balance, ``max(0, current + amount)``.
    """
    amount = max(amount, _MIN_CREDIT_DELTA)
    new_balance = User.credits + amount
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(credits=case((new_balance < 0, 0), else_=new_balance))
        .returning(User.credits)
    )
    credits = result.scalar_one_or_none()
    if credits is None:
        raise _user_not_found()

    logger.info("credits_adjusted", user_id=user_id, amount=amount, credits=credits)
    return credits


async def add_conversation_time(db: AsyncSession, user_id: str, seconds: int) -> int:
    """Atomically add conversation seconds. Returns the new total."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(total_conversation_time=User.total_conversation_time + seconds)
        .returning(User.total_conversation_time)
    )
    total = result.scalar_one_or_none()
    if total is None:
        raise _user_not_found()

    logger.info("conversation_time_added", user_id=user_id, seconds=seconds, total=total)
    return total


async def increment_completed_lessons(db: AsyncSession, user_id: str) -> int:
    """Atomically add one completed lesson. Returns the new count."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(completed_lessons=User.completed_lessons + 1)
        .returning(User.completed_lessons)
    )
    completed = result.scalar_one_or_none()
    if completed is None:
        raise _user_not_found()

    logger.info("lesson_completed", user_id=user_id, completed_lessons=completed)
    return completed
