"""Tests for the Database wrapper and the atomic unit of work."""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.config import Settings
from slp.database import Database, atomic
from slp.db.models import Lesson, Scenario, ScenarioChoice


class TestAtomic:
    async def test_commits_on_success(self, database: Database):
        async with database.session() as db, atomic(db):
            db.add(Lesson(title="Kept", content="", difficulty=1))

        async with database.session() as db:
            count = (await db.execute(select(func.count(Lesson.id)))).scalar_one()
        assert count == 1

    async def test_rolls_back_every_row_on_error(self, database: Database):
        async with database.session() as db:
            with pytest.raises(RuntimeError):
                async with atomic(db):
                    db.add(
                        Scenario(
                            title="Half-written",
                            description="",
                            difficulty=1,
                            choices=[ScenarioChoice(choice_text="A"), ScenarioChoice(choice_text="B")],
                        )
                    )
                    await db.flush()
                    raise RuntimeError("boom")

        async with database.session() as db:
            scenarios = (await db.execute(select(func.count(Scenario.id)))).scalar_one()
            choices = (await db.execute(select(func.count(ScenarioChoice.id)))).scalar_one()
        assert scenarios == 0
        assert choices == 0


class TestDatabase:
    def test_sqlite_engine_has_no_pool_sizing(self):
        db = Database.from_settings(Settings(database_url="sqlite+aiosqlite://"))
        assert db.engine.url.drivername == "sqlite+aiosqlite"

    def test_postgres_pool_is_bounded(self):
        settings = Settings(
            database_url="postgresql+asyncpg://u:p@localhost/db",
            db_pool_size=4,
            db_pool_timeout_seconds=2,
        )
        db = Database.from_settings(settings)
        assert db.engine.pool.size() == 4
        assert db.engine.pool._max_overflow == 0
        assert db.engine.pool._timeout == 2

    async def test_session_is_async(self, database: Database):
        async with database.session() as db:
            assert isinstance(db, AsyncSession)
