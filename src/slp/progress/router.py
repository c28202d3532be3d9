"""Progress API endpoints: scenario attempts, quiz scores, profile, leaderboard."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.dependencies import Identity, get_current_identity
from slp.auth.schemas import ProfileUser
from slp.auth.service import get_user_by_id
from slp.config import get_settings
from slp.database import get_session
from slp.errors import Forbidden, NotFoundError
from slp.progress.schemas import (
    LeaderboardEntry,
    ProfileResponse,
    ProgressIn,
    ProgressOut,
    ProgressSummary,
    QuizScoreIn,
    QuizScoreOut,
)
from slp.progress.service import (
    aggregate_stats,
    get_leaderboard,
    list_progress,
    record_progress,
    record_quiz_score,
)

router = APIRouter(tags=["Progress"])


@router.get("/user-progress/{user_id}", response_model=list[ProgressOut])
async def get_user_progress(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> list[ProgressOut]:
    """Scenario attempts for a user. Users see their own; admins see anyone's."""
    if user_id != identity.id and not identity.is_admin:
        raise Forbidden("Not allowed to view another user's progress")
    rows = await list_progress(db, user_id)
    return [ProgressOut.model_validate(row) for row in rows]


@router.post("/user-progress", response_model=ProgressOut, status_code=201)
async def post_user_progress(
    body: ProgressIn,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> ProgressOut:
    """Record a scenario attempt for the caller."""
    progress = await record_progress(db, identity.id, body.scenario_id, body.choice_id, body.outcome)
    return ProgressOut.model_validate(progress)


@router.post("/quiz-scores", response_model=QuizScoreOut, status_code=201)
async def post_quiz_score(
    body: QuizScoreIn,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> QuizScoreOut:
    """Record a quiz result (0-100) for the caller."""
    quiz = await record_quiz_score(db, identity.id, body.score, lesson_id=body.lesson_id)
    return QuizScoreOut.model_validate(quiz)


@router.get("/user-profile", response_model=ProfileResponse)
async def get_user_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """The caller's account plus aggregated progress."""
    user = await get_user_by_id(db, identity.id)
    if user is None:
        raise NotFoundError("User not found")
    stats = await aggregate_stats(db, identity.id)
    return ProfileResponse(
        user=ProfileUser(id=user.id, username=user.username, created_at=user.created_at),
        progress=ProgressSummary(
            completed_lessons=stats.completed_lessons,
            completed_scenarios=stats.completed_scenarios,
            average_quiz_score=stats.avg_quiz_score,
        ),
    )


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def leaderboard(db: AsyncSession = Depends(get_session)) -> list[LeaderboardEntry]:
    """Public top-N ranking."""
    rows = await get_leaderboard(db, limit=get_settings().leaderboard_size)
    return [LeaderboardEntry(**row) for row in rows]
