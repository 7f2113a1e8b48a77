"""Request/response schemas for lesson progress, achievements and todos."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from nativespeak.schemas import CamelModel

TodoStatus = Literal["todo", "inProgress", "completed"]


# ---------------------------------------------------------------------------
# Lesson progress
# ---------------------------------------------------------------------------


class LessonProgressEntry(CamelModel):
    """One value of the topic -> progress map."""

    current_step: int
    updated_at: datetime


class ProgressUpdateRequest(CamelModel):
    current_step: int = Field(..., ge=1, le=5)


class LessonProgressResponse(CamelModel):
    user_id: str
    lesson_topic: str
    current_step: int
    updated_at: datetime


class ProgressUpdateResponse(CamelModel):
    success: bool = True
    message: str
    progress: LessonProgressResponse


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


class AchievementSummary(CamelModel):
    achievement_id: str
    unlocked_at: datetime


class AchievementUnlockRequest(CamelModel):
    achievement_id: str = Field(..., min_length=1, max_length=100)


class AchievementResponse(CamelModel):
    user_id: str
    achievement_id: str
    unlocked_at: datetime


class AchievementUnlockResponse(CamelModel):
    success: bool = True
    message: str
    achievement: AchievementResponse


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


class TodoCreateRequest(CamelModel):
    text: str = Field(..., max_length=500)
    is_header: bool = False
    duration: int = Field(0, ge=0, le=2**31 - 1)


class TodoStatusUpdateRequest(CamelModel):
    status: TodoStatus


class TodoResponse(CamelModel):
    id: str
    user_id: str
    text: str
    is_header: bool
    duration: int
    order: int
    status: TodoStatus
    created_at: datetime
    updated_at: datetime


class TodoMutationResponse(CamelModel):
    success: bool = True
    message: str
    todo: TodoResponse


class MessageResponse(CamelModel):
    success: bool = True
    message: str
