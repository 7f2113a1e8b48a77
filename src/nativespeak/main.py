"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nativespeak.auth.jwt import build_token_codec
from nativespeak.auth.router import router as auth_router
from nativespeak.config import Settings, get_settings
from nativespeak.database import close_db, init_db
from nativespeak.health.router import router as health_router
from nativespeak.middleware import setup_middleware
from nativespeak.progress.router import router as progress_router
from nativespeak.users.router import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    await init_db(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout_seconds,
        command_timeout=settings.db_command_timeout_seconds,
    )

    yield

    await close_db()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="NativeSpeak API",
        description="REST backend for the NativeSpeak language-learning app",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.token_codec = build_token_codec(settings)

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(users_router, prefix=settings.api_prefix)
    app.include_router(progress_router, prefix=settings.api_prefix)

    return app


app = create_app()
