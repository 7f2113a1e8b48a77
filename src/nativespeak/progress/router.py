"""Progress router: lesson progress, achievements and todos under /progress/*."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from nativespeak.auth.dependencies import AuthContext, get_auth_context
from nativespeak.database import get_session
from nativespeak.progress.schemas import (
    AchievementResponse,
    AchievementSummary,
    AchievementUnlockRequest,
    AchievementUnlockResponse,
    LessonProgressEntry,
    LessonProgressResponse,
    MessageResponse,
    ProgressUpdateRequest,
    ProgressUpdateResponse,
    TodoCreateRequest,
    TodoMutationResponse,
    TodoResponse,
    TodoStatusUpdateRequest,
)
from nativespeak.progress.service import ProgressService

router = APIRouter(prefix="/progress", tags=["Progress"])


def get_progress_service(
    ctx: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_session),
) -> ProgressService:
    """Build a ProgressService bound to the caller."""
    return ProgressService(db, ctx.user_id)


# ---------------------------------------------------------------------------
# Lesson progress
# ---------------------------------------------------------------------------


@router.get("/lessons", response_model=dict[str, LessonProgressEntry])
async def get_lesson_progress(
    service: ProgressService = Depends(get_progress_service),
) -> dict[str, LessonProgressEntry]:
    """Map of topic -> {currentStep, updatedAt} for every touched topic."""
    rows = await service.list_lesson_progress()
    return {
        row.lesson_topic: LessonProgressEntry(current_step=row.current_step, updated_at=row.updated_at)
        for row in rows
    }


@router.put("/lessons/{topic}", response_model=ProgressUpdateResponse)
async def put_lesson_progress(
    body: ProgressUpdateRequest,
    topic: str = Path(..., min_length=1, max_length=100),
    service: ProgressService = Depends(get_progress_service),
) -> ProgressUpdateResponse:
    """Set the current step (1-5) for a lesson topic."""
    progress = await service.upsert_lesson_progress(topic, body.current_step)
    await service.db.commit()
    return ProgressUpdateResponse(
        message="Progress updated",
        progress=LessonProgressResponse.model_validate(progress),
    )


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------


@router.get("/achievements", response_model=list[AchievementSummary])
async def get_achievements(
    service: ProgressService = Depends(get_progress_service),
) -> list[AchievementSummary]:
    """Unlocked achievements, most recent first."""
    rows = await service.list_achievements()
    return [AchievementSummary.model_validate(row) for row in rows]


@router.post("/achievements", response_model=AchievementUnlockResponse, status_code=201)
async def unlock_achievement(
    body: AchievementUnlockRequest,
    response: Response,
    service: ProgressService = Depends(get_progress_service),
) -> AchievementUnlockResponse:
    """Unlock an achievement. 201 when new, 200 when it was already unlocked."""
    achievement, created = await service.unlock_achievement(body.achievement_id)
    await service.db.commit()
    if not created:
        response.status_code = 200
    return AchievementUnlockResponse(
        message="Achievement unlocked" if created else "Achievement already unlocked",
        achievement=AchievementResponse.model_validate(achievement),
    )


# ---------------------------------------------------------------------------
# Todos
# ---------------------------------------------------------------------------


@router.get("/todos", response_model=list[TodoResponse])
async def get_todos(
    service: ProgressService = Depends(get_progress_service),
) -> list[TodoResponse]:
    """The caller's todos in ascending order."""
    rows = await service.list_todos()
    return [TodoResponse.model_validate(row) for row in rows]


@router.post("/todos", response_model=TodoMutationResponse, status_code=201)
async def create_todo(
    body: TodoCreateRequest,
    service: ProgressService = Depends(get_progress_service),
) -> TodoMutationResponse:
    """Append a todo to the end of the list."""
    todo = await service.create_todo(body.text, is_header=body.is_header, duration=body.duration)
    await service.db.commit()
    return TodoMutationResponse(message="Todo created", todo=TodoResponse.model_validate(todo))


@router.patch("/todos/{todo_id}", response_model=TodoMutationResponse)
async def update_todo(
    todo_id: str,
    body: TodoStatusUpdateRequest,
    service: ProgressService = Depends(get_progress_service),
) -> TodoMutationResponse:
    """Change a todo's status."""
    todo = await service.update_todo_status(todo_id, body.status)
    await service.db.commit()
    return TodoMutationResponse(message="Todo updated", todo=TodoResponse.model_validate(todo))


@router.delete("/todos/{todo_id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: str,
    service: ProgressService = Depends(get_progress_service),
) -> MessageResponse:
    """Delete a todo."""
    await service.delete_todo(todo_id)
    await service.db.commit()
    return MessageResponse(message="Todo deleted")
