"""Tests for engine setup and column types."""

from datetime import datetime, timezone

from httpx import AsyncClient
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.db.models import User


def _parse(stamp: str) -> datetime:
    return datetime.fromisoformat(stamp.replace("Z", "+00:00"))


async def test_sqlite_enforces_foreign_keys(db_session: AsyncSession):
    assert await db_session.scalar(text("PRAGMA foreign_keys")) == 1


async def test_timestamps_read_back_as_utc(db_session: AsyncSession, registered_user: dict):
    user = await db_session.scalar(select(User).where(User.id == registered_user["user_id"]))
    assert user.study_start_date.tzinfo is not None
    assert user.study_start_date.utcoffset().total_seconds() == 0


async def test_timestamps_serialized_with_offset(authed_client: AsyncClient):
    me = (await authed_client.get("/api/auth/me")).json()["user"]
    assert _parse(me["studyStartDate"]).tzinfo is not None

    unlocked = await authed_client.post("/api/progress/achievements", json={"achievementId": "first_lesson"})
    assert _parse(unlocked.json()["achievement"]["unlockedAt"]).utcoffset().total_seconds() == 0

    listed = (await authed_client.get("/api/progress/achievements")).json()
    assert _parse(listed[0]["unlockedAt"]).tzinfo == timezone.utc
