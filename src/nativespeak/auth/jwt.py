"""
HS256 bearer token codec.

Tokens carry the account id and email as claims and are valid for a fixed
window (7 days by default). The signing secret is handed to ``TokenCodec``
explicitly; ``build_token_codec`` derives it from settings once at startup.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog

from nativespeak.config import Settings
from nativespeak.errors import InvalidCredential

logger = structlog.get_logger()

DEFAULT_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims recovered from a verified token."""

    user_id: str
    email: str


class TokenCodec:
    """Sign and verify bearer tokens with a single shared secret."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        issuer: str = "nativespeak",
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            msg = "Token signing secret must not be empty"
            raise ValueError(msg)
        self._secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.ttl = ttl
        self._clock = clock

    def issue(self, user_id: str, email: str) -> str:
        """
        Create a signed token for an account.

        Args:
            user_id: The account's database ID.
            email: The account's email address.

        Returns:
            Encoded JWT string.
        """
        now = self._clock()
        payload: dict[str, Any] = {
            "userId": user_id,
            "email": email,
            "iat": now,
            "exp": now + self.ttl,
            "iss": self.issuer,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify a token and return its identity claims.

        Raises:
            InvalidCredential: If the signature does not match, the payload is
                malformed, the issuer differs, or the token has expired.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss"]},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidCredential("Token has expired") from None
        except jwt.InvalidTokenError:
            raise InvalidCredential() from None

        user_id = payload.get("userId")
        email = payload.get("email")
        if not isinstance(user_id, str) or not user_id or not isinstance(email, str):
            raise InvalidCredential()
        return TokenClaims(user_id=user_id, email=email)


def build_token_codec(settings: Settings) -> TokenCodec:
    """
    Create the process-wide codec from settings.

    A missing secret is fatal in production. Elsewhere a random secret is
    generated, so tokens do not survive a restart.
    """
    if settings.jwt_secret is not None and settings.jwt_secret.get_secret_value():
        secret = settings.jwt_secret.get_secret_value()
    elif settings.is_production:
        msg = "NATIVESPEAK_JWT_SECRET must be set in production"
        raise RuntimeError(msg)
    else:
        logger.warning("jwt_secret_not_configured", environment=settings.environment)
        secret = secrets.token_urlsafe(64)

    return TokenCodec(
        secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        ttl=timedelta(days=settings.jwt_expire_days),
    )
