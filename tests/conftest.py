"""Shared test fixtures.

Each test gets a fresh SQLite database (aiosqlite) in its own temp dir, with
tables built from the ORM metadata.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.config import Settings
from nativespeak.database import close_db, get_engine, get_session, init_db
from nativespeak.db import models  # noqa: F401
from nativespeak.db.base import Base
from nativespeak.main import create_app

TEST_JWT_SECRET = "test-secret-do-not-use-anywhere-else"
TEST_PASSWORD = "senha123"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'nativespeak_test.db'}",
        jwt_secret=TEST_JWT_SECRET,
        environment="test",
        log_format="console",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """App with an initialized database and all tables created."""
    await init_db(settings.database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_app(settings)

    await close_db()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client bound to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for test assertions."""
    async for session in get_session():
        yield session
        break


async def _register_user(
    client: AsyncClient,
    email: str = "aluno@example.com",
    password: str = TEST_PASSWORD,
    first_name: str = "João",
    last_name: str = "Silva",
) -> dict:
    """Register a user via the API. Returns ids, token and ready-made headers."""
    response = await client.post("/api/auth/register", json={
        "email": email,
        "password": password,
        "firstName": first_name,
        "lastName": last_name,
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return {
        "email": email,
        "password": password,
        "user_id": data["user"]["id"],
        "token": data["token"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    return await _register_user(client)


@pytest_asyncio.fixture
async def other_user(client: AsyncClient) -> dict:
    """A second, unrelated account for ownership checks."""
    return await _register_user(client, email="outra@example.com", first_name="Maria", last_name="Souza")


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, registered_user: dict) -> AsyncClient:
    """Client carrying the registered user's bearer token."""
    client.headers["Authorization"] = registered_user["headers"]["Authorization"]
    return client


@pytest.fixture
def make_user(client: AsyncClient):
    """Factory for extra accounts: ``await make_user(email=...)``."""

    async def _make(**kwargs: str) -> dict:
        return await _register_user(client, **kwargs)

    return _make


@pytest.fixture
def token_codec(app: FastAPI):
    """The codec the app signs and verifies tokens with."""
    return app.state.token_codec
