"""Tests for RecommendationService."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from slp.db.models import User, UserLessonProgress, UserProgress, UserQuizScore
from slp.errors import DataAccessError
from slp.recommendations.service import RecommendationService
from tests.conftest import make_lesson, make_scenario, make_user


async def _level_43_user(db: AsyncSession) -> User:
    """A user with a 100 quiz average, 5 completed lessons and 5 attempted scenarios."""
    user = await make_user(db, "veteran")
    for i in range(5):
        lesson = await make_lesson(db, f"Done lesson {i}", difficulty=1)
        scenario = await make_scenario(db, f"Done scenario {i}", difficulty=1)
        db.add(UserLessonProgress(user_id=user.id, lesson_id=lesson.id, completed=True))
        db.add(UserProgress(user_id=user.id, scenario_id=scenario.id, outcome="survived"))
    db.add(UserQuizScore(user_id=user.id, score=100))
    await db.commit()
    return user


class TestColdStart:
    async def test_new_user_sees_only_easy_content(self, db_session: AsyncSession):
        user = await make_user(db_session)
        for difficulty in (0, 1, 2, 3):
            await make_lesson(db_session, f"L{difficulty}", difficulty)
            await make_scenario(db_session, f"S{difficulty}", difficulty)

        recs = await RecommendationService(db_session).recommend(user.id)

        assert recs.level == 0
        assert [lesson.difficulty for lesson in recs.lessons] == [1, 0]
        assert [s.difficulty for s in recs.scenarios] == [1, 0]

    async def test_empty_catalogue(self, db_session: AsyncSession):
        user = await make_user(db_session)

        recs = await RecommendationService(db_session).recommend(user.id)

        assert recs.level == 0
        assert recs.lessons == []
        assert recs.scenarios == []


class TestRanking:
    async def test_hardest_eligible_first(self, db_session: AsyncSession):
        user = await _level_43_user(db_session)
        too_hard = await make_lesson(db_session, "Too hard", 45)
        a = await make_lesson(db_session, "A", 44)
        b = await make_lesson(db_session, "B", 44)
        c = await make_lesson(db_session, "C", 30)
        await make_lesson(db_session, "D", 10)
        s_hard = await make_scenario(db_session, "S hard", 60)
        s_top = await make_scenario(db_session, "S top", 44)

        recs = await RecommendationService(db_session).recommend(user.id)

        assert recs.level == 43
        assert [lesson.id for lesson in recs.lessons] == [a.id, b.id, c.id]
        assert too_hard.id not in {lesson.id for lesson in recs.lessons}
        assert recs.scenarios[0].id == s_top.id
        assert s_hard.id not in {s.id for s in recs.scenarios}
        assert [s.id for s in recs.scenarios] == [s_top.id]

    async def test_limit_is_respected(self, db_session: AsyncSession):
        user = await make_user(db_session)
        for i in range(6):
            await make_lesson(db_session, f"L{i}", 1)

        recs = await RecommendationService(db_session, limit=2).recommend(user.id)

        assert len(recs.lessons) == 2


class TestExclusion:
    async def test_completed_items_excluded(self, db_session: AsyncSession):
        user = await _level_43_user(db_session)

        recs = await RecommendationService(db_session).recommend(user.id)

        assert recs.lessons == []
        assert recs.scenarios == []

    async def test_started_lesson_excluded(self, db_session: AsyncSession):
        user = await make_user(db_session)
        started = await make_lesson(db_session, "Started", 1)
        fresh = await make_lesson(db_session, "Fresh", 1)
        db_session.add(UserLessonProgress(user_id=user.id, lesson_id=started.id, completed=False))
        await db_session.commit()

        recs = await RecommendationService(db_session).recommend(user.id)

        assert [lesson.id for lesson in recs.lessons] == [fresh.id]

    async def test_other_users_progress_ignored(self, db_session: AsyncSession):
        alice = await make_user(db_session, "alice")
        bob = await make_user(db_session, "bob")
        scenario = await make_scenario(db_session, "Shared", 1)
        db_session.add(UserProgress(user_id=bob.id, scenario_id=scenario.id))
        await db_session.commit()

        recs = await RecommendationService(db_session).recommend(alice.id)

        assert [s.id for s in recs.scenarios] == [scenario.id]


class TestStability:
    async def test_repeated_calls_identical(self, db_session: AsyncSession):
        user = await make_user(db_session)
        for i in range(5):
            await make_lesson(db_session, f"L{i}", i % 2)
            await make_scenario(db_session, f"S{i}", i % 2)
        svc = RecommendationService(db_session)

        first = await svc.recommend(user.id)
        second = await svc.recommend(user.id)

        assert first.level == second.level
        assert [x.id for x in first.lessons] == [x.id for x in second.lessons]
        assert [x.id for x in first.scenarios] == [x.id for x in second.scenarios]


class TestFailure:
    async def test_query_failure_raises_data_access_error(self):
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with pytest.raises(DataAccessError) as exc_info:
            await RecommendationService(db).recommend(1)

        assert isinstance(exc_info.value.__cause__, OperationalError)

    async def test_failure_after_first_query_returns_nothing(self, db_session: AsyncSession):
        user = await make_user(db_session)
        await make_lesson(db_session, "L", 1)
        real_execute = db_session.execute
        calls = 0

        async def flaky(*args, **kwargs):
            nonlocal calls
            calls += 1
            if calls == 3:
                raise OperationalError("SELECT", {}, Exception("lost connection"))
            return await real_execute(*args, **kwargs)

        db_session.execute = flaky  # type: ignore[method-assign]

        with pytest.raises(DataAccessError):
            await RecommendationService(db_session).recommend(user.id)
