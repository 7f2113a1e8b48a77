"""
Password hashing and validation using argon2id.

Argon2id is the winner of the Password Hashing Competition and is resistant
to both GPU-based and side-channel attacks.
"""

from __future__ import annotations

import argon2

from nativespeak.errors import ValidationError

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,  # 64 MB
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=argon2.Type.ID,  # argon2id
)

_dummy_hash: str | None = None


class PasswordPolicyError(ValidationError):
    """Raised when a password does not meet the length policy."""


def hash_password(password: str) -> str:
    """Hash a password using argon2id. Returns the full hash string."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its argon2id hash.

    Returns True if the password matches. Never raises on mismatch.
    """
    try:
        return _hasher.verify(password_hash, password)
    except argon2.exceptions.VerifyMismatchError:
        return False
    except argon2.exceptions.InvalidHashError:
        return False


def burn_verification(password: str) -> None:
    """Run one verification against a throwaway hash.

    Used when the account does not exist, so a failed login costs the same
    time either way.
    """
    global _dummy_hash  # noqa: PLW0603
    if _dummy_hash is None:
        _dummy_hash = _hasher.hash("nativespeak-timing-equalizer")
    verify_password(password, _dummy_hash)


def check_needs_rehash(password_hash: str) -> bool:
    """Check if the hash needs to be updated (parameters changed)."""
    return _hasher.check_needs_rehash(password_hash)


def validate_password_length(password: str, min_length: int = 6, max_length: int = 128) -> None:
    """
    Validate the password length policy.

    Raises PasswordPolicyError if the password is too short or too long.
    The upper bound prevents DoS via huge passwords.
    """
    if len(password) < min_length:
        msg = f"Password must be at least {min_length} characters"
        raise PasswordPolicyError(msg)
    if len(password) > max_length:
        msg = f"Password must not exceed {max_length} characters"
        raise PasswordPolicyError(msg)
