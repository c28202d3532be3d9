"""Content service: lesson and scenario authoring plus lesson completion.

Every write runs inside :func:`slp.database.atomic`: a scenario and its
choices are inserted, replaced, or deleted together or not at all.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.content.schemas import ChoiceIn, LessonIn, ScenarioIn
from slp.database import atomic
from slp.db.models import Lesson, Scenario, ScenarioChoice, UserLessonProgress
from slp.errors import NotFoundError

logger = logging.getLogger(__name__)


class LessonNotFound(NotFoundError):
    detail = "Lesson not found"


class ScenarioNotFound(NotFoundError):
    detail = "Scenario not found"


def _build_choices(choices: list[ChoiceIn]) -> list[ScenarioChoice]:
    return [
        ScenarioChoice(choice_text=c.text, outcome=c.outcome, survivability=c.survivability)
        for c in choices
    ]


class ContentService:
    """Lesson and scenario CRUD."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # --- Lessons ---

    async def list_lessons(self) -> list[Lesson]:
        result = await self.db.execute(select(Lesson).order_by(Lesson.id))
        return list(result.scalars().all())

    async def get_lesson(self, lesson_id: int) -> Lesson:
        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise LessonNotFound
        return lesson

    async def create_lesson(self, data: LessonIn) -> Lesson:
        lesson = Lesson(
            title=data.title,
            content=data.content,
            media_type=data.media_type,
            media_url=data.media_url,
            difficulty=data.difficulty,
        )
        async with atomic(self.db):
            self.db.add(lesson)
            await self.db.flush()
        logger.info("Lesson %s created (difficulty %s)", lesson.id, lesson.difficulty)
        return lesson

    async def update_lesson(self, lesson_id: int, data: LessonIn) -> Lesson:
        async with atomic(self.db):
            lesson = await self.get_lesson(lesson_id)
            lesson.title = data.title
            lesson.content = data.content
            lesson.media_type = data.media_type
            lesson.media_url = data.media_url
            lesson.difficulty = data.difficulty
        return lesson

    async def delete_lesson(self, lesson_id: int) -> None:
        async with atomic(self.db):
            lesson = await self.get_lesson(lesson_id)
            await self.db.delete(lesson)
        logger.info("Lesson %s deleted", lesson_id)

    async def complete_lesson(self, user_id: int, lesson_id: int) -> bool:
        """Mark a lesson complete for a user.

        Idempotent. Returns True if the lesson was already complete.
        """
        async with atomic(self.db):
            await self.get_lesson(lesson_id)
            result = await self.db.execute(
                select(UserLessonProgress).where(
                    UserLessonProgress.user_id == user_id,
                    UserLessonProgress.lesson_id == lesson_id,
                )
            )
            progress = result.scalar_one_or_none()
            if progress is not None and progress.completed:
                return True

            now = datetime.now(timezone.utc)
            if progress is None:
                self.db.add(
                    UserLessonProgress(user_id=user_id, lesson_id=lesson_id, completed=True, completed_at=now)
                )
            else:
                progress.completed = True
                progress.completed_at = now
        return False

    # --- Scenarios ---

    async def list_scenarios(self) -> list[Scenario]:
        result = await self.db.execute(select(Scenario).order_by(Scenario.id))
        return list(result.scalars().all())

    async def get_scenario(self, scenario_id: int) -> Scenario:
        scenario = await self.db.get(Scenario, scenario_id)
        if scenario is None:
            raise ScenarioNotFound
        return scenario

    async def create_scenario(self, data: ScenarioIn) -> Scenario:
        """Insert a scenario and all of its choices in one transaction."""
        scenario = Scenario(
            title=data.title,
            description=data.description,
            media_type=data.media_type,
            media_url=data.media_url,
            difficulty=data.difficulty,
            choices=_build_choices(data.choices),
        )
        async with atomic(self.db):
            self.db.add(scenario)
            await self.db.flush()
        logger.info("Scenario %s created with %d choices", scenario.id, len(scenario.choices))
        return scenario

    async def update_scenario(self, scenario_id: int, data: ScenarioIn) -> Scenario:
        """Update a scenario and replace its choices in one transaction."""
        async with atomic(self.db):
            scenario = await self.get_scenario(scenario_id)
            scenario.title = data.title
            scenario.description = data.description
            scenario.media_type = data.media_type
            scenario.media_url = data.media_url
            scenario.difficulty = data.difficulty
            scenario.choices = _build_choices(data.choices)
            await self.db.flush()
        return scenario

    async def delete_scenario(self, scenario_id: int) -> None:
        """Delete a scenario and its choices in one transaction."""
        async with atomic(self.db):
            scenario = await self.get_scenario(scenario_id)
            await self.db.delete(scenario)
        logger.info("Scenario %s deleted", scenario_id)
