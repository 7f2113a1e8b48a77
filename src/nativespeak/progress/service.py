"""Progress service: lesson steps, achievements and the study todo list."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.db.dialect import upsert_insert
from nativespeak.db.models import Achievement, LessonProgress, Todo, User
from nativespeak.errors import NotFound

logger = logging.getLogger(__name__)


class ProgressService:
    """Per-user learning state. Every query is scoped to ``user_id``."""

    def __init__(self, db: AsyncSession, user_id: str) -> None:
        self.db = db
        self.user_id = user_id

    # --- Lesson progress ---

    async def list_lesson_progress(self) -> list[LessonProgress]:
        """All topics the user has touched."""
        result = await self.db.execute(
            select(LessonProgress)
            .where(LessonProgress.user_id == self.user_id)
            .order_by(LessonProgress.lesson_topic)
        )
        return list(result.scalars().all())

    async def upsert_lesson_progress(self, topic: str, current_step: int) -> LessonProgress:
        """Create or overwrite the step for a topic.

        A lower step may replace a higher one.
        """
        now = datetime.now(timezone.utc)
        stmt = upsert_insert(self.db, LessonProgress).values(
            user_id=self.user_id,
            lesson_topic=topic,
            current_step=current_step,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[LessonProgress.user_id, LessonProgress.lesson_topic],
            set_={"current_step": current_step, "updated_at": now},
        ).returning(LessonProgress)

        try:
            result = await self.db.scalars(stmt, execution_options={"populate_existing": True})
            progress = result.one()
        except IntegrityError as e:
            raise self._missing_user() from e

        logger.info("Lesson progress user=%s topic=%s step=%d", self.user_id, topic, current_step)
        return progress

    # --- Achievements ---

    async def list_achievements(self) -> list[Achievement]:
        """Unlocked achievements, most recent first."""
        result = await self.db.execute(
            select(Achievement)
            .where(Achievement.user_id == self.user_id)
            .order_by(Achievement.unlocked_at.desc(), Achievement.achievement_id)
        )
        return list(result.scalars().all())

    async def unlock_achievement(self, achievement_id: str) -> tuple[Achievement, bool]:
        """Unlock an achievement.

        Returns (achievement, created). A repeated unlock returns the stored
        row with its original ``unlocked_at`` and ``created=False``.
        """
        stmt = (
            upsert_insert(self.db, Achievement)
            .values(
                user_id=self.user_id,
                achievement_id=achievement_id,
                unlocked_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(index_elements=[Achievement.user_id, Achievement.achievement_id])
            .returning(Achievement)
        )
        try:
            inserted = (await self.db.scalars(stmt)).one_or_none()
        except IntegrityError as e:
            raise self._missing_user() from e

        if inserted is not None:
            logger.info("Achievement unlocked user=%s achievement=%s", self.user_id, achievement_id)
            return inserted, True

        result = await self.db.execute(
            select(Achievement).where(
                Achievement.user_id == self.user_id,
                Achievement.achievement_id == achievement_id,
            )
        )
        return result.scalar_one(), False

    # --- Todos ---

    async def list_todos(self) -> list[Todo]:
        """The user's todos in display order."""
        result = await self.db.execute(
            select(Todo)
            .where(Todo.user_id == self.user_id)
            .order_by(Todo.order, Todo.created_at)
        )
        return list(result.scalars().all())

    async def create_todo(self, text: str, is_header: bool = False, duration: int = 0) -> Todo:
        """Append a todo after the user's current last one.

        The account row is locked first so concurrent creations for the same
        user take turns computing ``MAX(order) + 1``.
        """
        owner = await self.db.execute(
            select(User.id).where(User.id == self.user_id).with_for_update()
        )
        if owner.scalar_one_or_none() is None:
            raise self._missing_user()

        next_order = (
            select(func.coalesce(func.max(Todo.order), 0) + 1)
            .where(Todo.user_id == self.user_id)
            .scalar_subquery()
        )
        now = datetime.now(timezone.utc)
        stmt = (
            insert(Todo)
            .values(
                id=str(uuid4()),
                user_id=self.user_id,
                text=text,
                is_header=is_header,
                duration=duration,
                order=next_order,
                status="todo",
                created_at=now,
                updated_at=now,
            )
            .returning(Todo)
        )
        todo = (await self.db.scalars(stmt)).one()
        logger.info("Todo created user=%s todo=%s order=%d", self.user_id, todo.id, todo.order)
        return todo

    async def update_todo_status(self, todo_id: str, status: str) -> Todo:
        """Change a todo's status.

        Raises:
            NotFound: If the todo does not exist or belongs to someone else.
        """
        result = await self.db.execute(
            update(Todo)
            .where(Todo.id == todo_id, Todo.user_id == self.user_id)
            .values(status=status, updated_at=datetime.now(timezone.utc))
            .returning(Todo)
        )
        todo = result.scalar_one_or_none()
        if todo is None:
            raise NotFound("Todo not found")
        return todo

    async def delete_todo(self, todo_id: str) -> None:
        """Delete a todo.

        Raises:
            NotFound: If the todo does not exist or belongs to someone else.
        """
        result = await self.db.execute(
            delete(Todo)
            .where(Todo.id == todo_id, Todo.user_id == self.user_id)
            .returning(Todo.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFound("Todo not found")
        logger.info("Todo deleted user=%s todo=%s", self.user_id, todo_id)

    @staticmethod
    def _missing_user() -> NotFound:
        return NotFound("User not found")
