"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

_NOT_INITIALIZED = "Database not initialized. Call init_db() first."


def _engine_options(
    url: str,
    pool_size: int,
    max_overflow: int,
    pool_timeout: float,
    command_timeout: float,
) -> dict[str, Any]:
    """Build engine kwargs for the target dialect.

    asyncpg gets a per-statement ``command_timeout``; SQLite (local runs and
    tests) uses its own pool and a busy timeout instead.
    """
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"timeout": command_timeout}}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
        "pool_pre_ping": True,
        "connect_args": {"statement_cache_size": 0, "command_timeout": command_timeout},
    }


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:  # noqa: ANN401
    """SQLite leaves foreign keys unenforced unless asked, per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def init_db(
    url: str,
    *,
    pool_size: int = 20,
    max_overflow: int = 10,
    pool_timeout: float = 10.0,
    command_timeout: float = 10.0,
) -> None:
    """Create the module-level engine and session factory for ``url``."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(
        url,
        echo=False,
        **_engine_options(url, pool_size, max_overflow, pool_timeout, command_timeout),
    )
    if make_url(url).get_backend_name() == "sqlite":
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def close_db() -> None:
    """Dispose of the engine and drop the session factory."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session. Handlers commit; anything uncommitted is rolled back."""
    if _session_factory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    async with _session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
