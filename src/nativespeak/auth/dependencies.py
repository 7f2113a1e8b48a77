"""FastAPI authentication dependencies (the auth gate)."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from fastapi import Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from nativespeak.auth.jwt import TokenCodec
from nativespeak.errors import MissingCredential

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Verified identity of the caller, produced once per request."""

    user_id: str
    email: str


def get_token_codec(request: Request) -> TokenCodec:
    """Return the codec built by the app factory."""
    return request.app.state.token_codec


async def get_auth_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> AuthContext:
    """
    Extract and verify the bearer token, return the caller's identity.

    Trusts the token's claims for its whole lifetime and never touches the
    database. Raises MissingCredential (401) when no bearer token is sent and
    InvalidCredential (403) when verification fails.
    """
    if credentials is None or not credentials.credentials:
        raise MissingCredential()

    claims = get_token_codec(request).verify(credentials.credentials)
    structlog.contextvars.bind_contextvars(user_id=claims.user_id)
    return AuthContext(user_id=claims.user_id, email=claims.email)
