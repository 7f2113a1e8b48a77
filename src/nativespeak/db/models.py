"""ORM models for accounts and per-user learning state.

Tables are created by the Alembic migration in ``alembic/versions``; tests
build them straight from this metadata.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nativespeak.db.base import Base
from nativespeak.db.types import UTCDateTime

TODO_STATUSES = ("todo", "inProgress", "completed")


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class User(Base):
    """Maps to the 'users' table."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("credits >= 0", name="credits_non_negative"),
        CheckConstraint("total_conversation_time >= 0", name="conversation_time_non_negative"),
        CheckConstraint("completed_lessons >= 0", name="completed_lessons_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    theme: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # --- Aggregate counters ---
    credits: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    total_conversation_time: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0, server_default="0")
    completed_lessons: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    terms_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    study_start_date: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow, server_default=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )

    # --- Relationships ---
    lesson_progress: Mapped[list[LessonProgress]] = relationship(
        "LessonProgress", back_populates="user", passive_deletes=True
    )
    achievements: Mapped[list[Achievement]] = relationship(
        "Achievement", back_populates="user", passive_deletes=True
    )
    todos: Mapped[list[Todo]] = relationship("Todo", back_populates="user", passive_deletes=True)


# ---------------------------------------------------------------------------
# Lesson progress
# ---------------------------------------------------------------------------


class LessonProgress(Base):
    """Current step reached per (user, lesson topic)."""

    __tablename__ = "lesson_progress"
    __table_args__ = (CheckConstraint("current_step BETWEEN 1 AND 5", name="current_step_range"),)

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    lesson_topic: Mapped[str] = mapped_column(String(100), primary_key=True)
    current_step: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="lesson_progress")


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


class Achievement(Base):
    """An unlocked achievement. Insert-only."""

    __tablename__ = "achievements"
    __table_args__ = (Index("ix_achievements_user_unlocked", "user_id", "unlocked_at"),)

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    achievement_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    unlocked_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="achievements")


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


class Todo(Base):
    """Study plan entry. ``order`` drives display sequencing only."""

    __tablename__ = "todos"
    __table_args__ = (
        CheckConstraint(
            "status IN ('todo', 'inProgress', 'completed')",
            name="status_valid",
        ),
        CheckConstraint("duration >= 0", name="duration_non_negative"),
        Index("ix_todos_user_id_order", "user_id", "order"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_header: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="todo", server_default="todo")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    user: Mapped[User] = relationship("User", back_populates="todos")
