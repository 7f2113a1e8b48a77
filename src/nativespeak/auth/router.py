"""Authentication router: all /auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.auth.dependencies import AuthContext, get_auth_context, get_token_codec
from nativespeak.auth.jwt import TokenCodec
from nativespeak.auth.schemas import (
    AcceptTermsResponse,
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from nativespeak.auth.service import (
    accept_terms,
    authenticate_user,
    register_user,
    require_user,
)
from nativespeak.database import get_session

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthResponse:
    """Register with email + password + name."""
    user = await register_user(
        db,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    await db.commit()
    return AuthResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
        token=codec.issue(user.id, user.email),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> AuthResponse:
    """Login with email + password."""
    user = await authenticate_user(db, body.email, body.password)
    await db.commit()
    logger.info("user_logged_in", user_id=user.id)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user),
        token=codec.issue(user.id, user.email),
    )


@router.get("/me", response_model=MeResponse)
async def me(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> MeResponse:
    """Get the authenticated user's own account."""
    user = await require_user(db, ctx.user_id)
    return MeResponse(user=UserResponse.model_validate(user))


@router.post("/accept-terms", response_model=AcceptTermsResponse)
async def accept_terms_endpoint(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> AcceptTermsResponse:
    """Accept the terms of use."""
    user = await accept_terms(db, ctx.user_id)
    await db.commit()
    return AcceptTermsResponse(
        message="Terms accepted successfully",
        user=UserResponse.model_validate(user),
    )
