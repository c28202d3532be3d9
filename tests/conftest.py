"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

os.environ["SLP_JWT_SECRET"] = "test-secret-do-not-use-in-production-0123456789"
os.environ["SLP_LOG_FORMAT"] = "console"
os.environ["SLP_DATABASE_URL"] = "sqlite+aiosqlite://"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from slp.config import get_settings  # noqa: E402

get_settings.cache_clear()

from slp.auth.jwt import create_access_token  # noqa: E402
from slp.auth.password import hash_password  # noqa: E402
from slp.database import Database  # noqa: E402
from slp.db import models  # noqa: E402, F401
from slp.db.base import Base  # noqa: E402
from slp.db.models import Lesson, Scenario, ScenarioChoice, User  # noqa: E402
from slp.main import create_app  # noqa: E402

TEST_PASSWORD = "CorrectHorse9"


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """In-memory SQLite database with the full schema, shared by every session."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    db = Database(engine)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for setup and assertions."""
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def app(database: Database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client bound to the in-memory database."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def make_user(
    db: AsyncSession,
    username: str = "learner",
    password: str = TEST_PASSWORD,
    is_admin: bool = False,
) -> User:
    """Insert a user directly, bypassing the registration endpoint."""
    user = User(username=username, password_hash=hash_password(password), is_admin=is_admin)
    db.add(user)
    await db.commit()
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.username, user.is_admin)}"}


async def make_lesson(db: AsyncSession, title: str = "Lesson", difficulty: int = 1) -> Lesson:
    lesson = Lesson(title=title, content=f"{title} content", difficulty=difficulty)
    db.add(lesson)
    await db.commit()
    return lesson


async def make_scenario(
    db: AsyncSession,
    title: str = "Scenario",
    difficulty: int = 1,
    choices: int = 2,
) -> Scenario:
    scenario = Scenario(
        title=title,
        description=f"{title} description",
        difficulty=difficulty,
        choices=[
            ScenarioChoice(choice_text=f"Option {i}", outcome=f"Outcome {i}", survivability=i * 10)
            for i in range(choices)
        ],
    )
    db.add(scenario)
    await db.commit()
    return scenario


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, user: User) -> AsyncClient:
    """Client carrying a valid bearer token for ``user``."""
    client.headers.update(auth_headers(user))
    return client
