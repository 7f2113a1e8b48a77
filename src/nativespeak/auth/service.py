"""
Authentication business logic.

Handles account creation, credential checks and the terms-acceptance flag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from nativespeak.auth.password import (
    burn_verification,
    check_needs_rehash,
    hash_password,
    validate_password_length,
    verify_password,
)
from nativespeak.config import get_settings
from nativespeak.db.models import User
from nativespeak.errors import DuplicateIdentity, InvalidCredential, NotFound

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

INVALID_LOGIN_MESSAGE = "Invalid email or password"


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: str) -> User:
    """Fetch the caller's own row or raise NotFound if it vanished."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = "User not found"
        raise NotFound(msg)
    return user


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> User:
    """
    Register a new account with email + password.

    Raises:
        PasswordPolicyError: If the password length is out of bounds.
        DuplicateIdentity: If the email is taken, whether found by the
            pre-check or by the unique constraint at write time.
    """
    settings = get_settings()
    validate_password_length(password, settings.password_min_length, settings.password_max_length)

    email = email.lower().strip()
    if await get_user_by_email(db, email) is not None:
        raise DuplicateIdentity()

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        terms_accepted=True,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        # Concurrent registration won the race for this email
        await db.rollback()
        raise DuplicateIdentity() from e

    logger.info("user_registered", user_id=user.id)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Authenticate an account with email + password.

    Raises:
        InvalidCredential: With the same message whether the email is
            unknown or the password is wrong.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        burn_verification(password)
        raise InvalidCredential(INVALID_LOGIN_MESSAGE, status_code=401)

    if not verify_password(password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        raise InvalidCredential(INVALID_LOGIN_MESSAGE, status_code=401)

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        await db.flush()
        logger.info("password_rehashed", user_id=user.id)

    return user


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


async def accept_terms(db: AsyncSession, user_id: str) -> User:
    """Mark the terms as accepted. Idempotent."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(terms_accepted=True)
        .returning(User)
    )
    user = result.scalar_one_or_none()
    if user is None:
        msg = "User not found"
        raise NotFound(msg)
    return user
