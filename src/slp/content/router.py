"""Content API endpoints: lessons and scenarios.

Listing is public; every write requires a valid access token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.dependencies import Identity, get_current_identity
from slp.content.schemas import (
    DeleteResponse,
    LessonCompletionOut,
    LessonIn,
    LessonOut,
    ScenarioIn,
    ScenarioOut,
)
from slp.content.service import ContentService
from slp.database import get_session

router = APIRouter(tags=["Content"])


# ---- Lessons ----


@router.get("/lessons", response_model=list[LessonOut])
async def list_lessons(db: AsyncSession = Depends(get_session)) -> list[LessonOut]:
    """List all lessons."""
    lessons = await ContentService(db).list_lessons()
    return [LessonOut.model_validate(lesson) for lesson in lessons]


@router.post("/lessons", response_model=LessonOut, status_code=201)
async def create_lesson(
    body: LessonIn,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> LessonOut:
    lesson = await ContentService(db).create_lesson(body)
    return LessonOut.model_validate(lesson)


@router.put("/lessons/{lesson_id}", response_model=LessonOut)
async def update_lesson(
    lesson_id: int,
    body: LessonIn,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> LessonOut:
    lesson = await ContentService(db).update_lesson(lesson_id, body)
    return LessonOut.model_validate(lesson)


@router.delete("/lessons/{lesson_id}", response_model=DeleteResponse)
async def delete_lesson(
    lesson_id: int,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> DeleteResponse:
    await ContentService(db).delete_lesson(lesson_id)
    return DeleteResponse()


@router.post("/lessons/{lesson_id}/complete", response_model=LessonCompletionOut)
async def complete_lesson(
    lesson_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> LessonCompletionOut:
    """Mark a lesson as complete for the caller. Idempotent."""
    already = await ContentService(db).complete_lesson(identity.id, lesson_id)
    return LessonCompletionOut(lesson_id=lesson_id, already_completed=already)


# ---- Scenarios ----


@router.get("/scenarios", response_model=list[ScenarioOut])
async def list_scenarios(db: AsyncSession = Depends(get_session)) -> list[ScenarioOut]:
    """List all scenarios with their choices."""
    scenarios = await ContentService(db).list_scenarios()
    return [ScenarioOut.model_validate(s) for s in scenarios]


@router.post("/scenarios", response_model=ScenarioOut, status_code=201)
async def create_scenario(
    body: ScenarioIn,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> ScenarioOut:
    scenario = await ContentService(db).create_scenario(body)
    return ScenarioOut.model_validate(scenario)


@router.put("/scenarios/{scenario_id}", response_model=ScenarioOut)
async def update_scenario(
    scenario_id: int,
    body: ScenarioIn,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> ScenarioOut:
    scenario = await ContentService(db).update_scenario(scenario_id, body)
    return ScenarioOut.model_validate(scenario)


@router.delete("/scenarios/{scenario_id}", response_model=DeleteResponse)
async def delete_scenario(
    scenario_id: int,
    _identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> DeleteResponse:
    await ContentService(db).delete_scenario(scenario_id)
    return DeleteResponse()
