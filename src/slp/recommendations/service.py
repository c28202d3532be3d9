"""Recommendation service: next lessons and scenarios for a user.

Pipeline: aggregate stats -> level -> two content queries. Each query picks
items with ``difficulty <= level + 1`` that the user has no progress row for,
hardest first, ties broken by id so repeated calls return the same order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from slp.db.models import Lesson, Scenario, UserLessonProgress, UserProgress
from slp.errors import DataAccessError
from slp.progress.service import AggregatedStats, aggregate_stats
from slp.recommendations.leveling import compute_level, difficulty_ceiling

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 3


@dataclass
class Recommendations:
    level: int
    stats: AggregatedStats
    lessons: list[Lesson] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)


class RecommendationService:
    """Difficulty-ceiling recommender over lessons and scenarios."""

    def __init__(self, db: AsyncSession, limit: int = DEFAULT_LIMIT) -> None:
        self.db = db
        self.limit = limit

    async def recommend(self, user_id: int) -> Recommendations:
        """Recommend up to ``limit`` lessons and ``limit`` scenarios.

        Raises:
            DataAccessError: If any of the underlying queries fails. No partial
                result is ever returned.
        """
        try:
            stats = await aggregate_stats(self.db, user_id)
            level = compute_level(stats)
            ceiling = difficulty_ceiling(level)
            lessons = await self._lessons(user_id, ceiling)
            scenarios = await self._scenarios(user_id, ceiling)
        except SQLAlchemyError as e:
            logger.exception("Recommendation queries failed for user %s", user_id)
            raise DataAccessError from e

        logger.debug(
            "Recommended %d lessons and %d scenarios for user %s at level %s",
            len(lessons), len(scenarios), user_id, level,
        )
        return Recommendations(level=level, stats=stats, lessons=lessons, scenarios=scenarios)

    async def _lessons(self, user_id: int, ceiling: int) -> list[Lesson]:
        touched = select(UserLessonProgress.id).where(
            UserLessonProgress.lesson_id == Lesson.id,
            UserLessonProgress.user_id == user_id,
        )
        result = await self.db.execute(
            select(Lesson)
            .where(Lesson.difficulty <= ceiling, ~touched.exists())
            .order_by(Lesson.difficulty.desc(), Lesson.id)
            .limit(self.limit)
        )
        return list(result.scalars().all())

    async def _scenarios(self, user_id: int, ceiling: int) -> list[Scenario]:
        attempted = select(UserProgress.id).where(
            UserProgress.scenario_id == Scenario.id,
            UserProgress.user_id == user_id,
        )
        result = await self.db.execute(
            select(Scenario)
            .where(Scenario.difficulty <= ceiling, ~attempted.exists())
            .order_by(Scenario.difficulty.desc(), Scenario.id)
            .limit(self.limit)
        )
        return list(result.scalars().all())
