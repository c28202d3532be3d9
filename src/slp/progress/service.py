"""Progress service: recording attempts and aggregating per-user statistics.

Statistics are recomputed from the progress tables on every call; nothing is
memoised, so they always reflect the persisted state at query time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.database import atomic
from slp.db.models import Scenario, User, UserLessonProgress, UserProgress, UserQuizScore
from slp.errors import NotFoundError, ValidationFailed


@dataclass(frozen=True)
class AggregatedStats:
    """Per-user aggregates feeding the level formula."""

    avg_quiz_score: float = 0.0
    completed_lessons: int = 0
    completed_scenarios: int = 0


def _avg_quiz_score(user_id: Any) -> Select:
    return select(func.avg(UserQuizScore.score)).where(UserQuizScore.user_id == user_id)


def _completed_lessons(user_id: Any) -> Select:
    return select(func.count(distinct(UserLessonProgress.lesson_id))).where(
        UserLessonProgress.user_id == user_id,
        UserLessonProgress.completed.is_(True),
    )


def _completed_scenarios(user_id: Any) -> Select:
    return select(func.count(distinct(UserProgress.scenario_id))).where(UserProgress.user_id == user_id)


async def aggregate_stats(db: AsyncSession, user_id: int) -> AggregatedStats:
    """Compute quiz average and distinct completion counts for one user.

    An unknown user or a user without history yields all zeros.
    """
    stmt = select(
        _avg_quiz_score(user_id).scalar_subquery().label("avg_quiz_score"),
        _completed_lessons(user_id).scalar_subquery().label("completed_lessons"),
        _completed_scenarios(user_id).scalar_subquery().label("completed_scenarios"),
    )
    row = (await db.execute(stmt)).one()
    return AggregatedStats(
        avg_quiz_score=float(row.avg_quiz_score) if row.avg_quiz_score is not None else 0.0,
        completed_lessons=int(row.completed_lessons or 0),
        completed_scenarios=int(row.completed_scenarios or 0),
    )


async def get_leaderboard(db: AsyncSession, limit: int = 10) -> list[dict]:
    """Top users by lessons, then scenarios, then quiz average (users without quizzes last)."""
    lessons = _completed_lessons(User.id).correlate(User).scalar_subquery().label("completed_lessons")
    scenarios = _completed_scenarios(User.id).correlate(User).scalar_subquery().label("completed_scenarios")
    avg_score = _avg_quiz_score(User.id).correlate(User).scalar_subquery().label("average_quiz_score")

    result = await db.execute(
        select(User.username, lessons, scenarios, avg_score)
        .order_by(lessons.desc(), scenarios.desc(), avg_score.desc().nulls_last(), User.id)
        .limit(limit)
    )
    return [
        {
            "username": row.username,
            "completed_lessons": int(row.completed_lessons or 0),
            "completed_scenarios": int(row.completed_scenarios or 0),
            "average_quiz_score": float(row.average_quiz_score) if row.average_quiz_score is not None else None,
        }
        for row in result
    ]


async def list_progress(db: AsyncSession, user_id: int) -> list[UserProgress]:
    result = await db.execute(
        select(UserProgress).where(UserProgress.user_id == user_id).order_by(UserProgress.id)
    )
    return list(result.scalars().all())


async def record_progress(
    db: AsyncSession,
    user_id: int,
    scenario_id: int,
    choice_id: int | None,
    outcome: str | None,
) -> UserProgress:
    """Store a scenario attempt. The choice, if given, must belong to the scenario."""
    async with atomic(db):
        scenario = await db.get(Scenario, scenario_id)
        if scenario is None:
            raise NotFoundError("Scenario not found")
        if choice_id is not None and choice_id not in {c.id for c in scenario.choices}:
            raise ValidationFailed("Choice does not belong to this scenario")

        progress = UserProgress(user_id=user_id, scenario_id=scenario_id, choice_id=choice_id, outcome=outcome)
        db.add(progress)
        await db.flush()
    return progress


async def record_quiz_score(
    db: AsyncSession,
    user_id: int,
    score: float,
    lesson_id: int | None = None,
) -> UserQuizScore:
    async with atomic(db):
        quiz = UserQuizScore(user_id=user_id, lesson_id=lesson_id, score=score)
        db.add(quiz)
        await db.flush()
    return quiz
