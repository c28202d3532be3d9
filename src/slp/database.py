"""Async SQLAlchemy engine and session management.

The engine is owned by a :class:`Database` instance that the application
creates at startup and disposes at shutdown. Request handlers reach it through
``app.state.database`` via the :func:`get_session` dependency.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from slp.config import Settings


class Database:
    """Owns a bounded connection pool and the session factory bound to it."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Create the engine described by the settings.

        The pool holds at most ``db_pool_size`` connections; callers beyond
        that queue until one is released or ``db_pool_timeout_seconds`` passes.
        """
        url = settings.database_url
        kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": False}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=0,
                pool_timeout=settings.db_pool_timeout_seconds,
            )
        if url.startswith("postgresql+asyncpg"):
            kwargs["connect_args"] = {
                "statement_cache_size": 0,
                "command_timeout": settings.db_command_timeout_seconds,
            }
        return cls(create_async_engine(url, **kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session that is closed (and rolled back if uncommitted) on exit."""
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a unit of work as one transaction: commit on success, roll back on any error."""
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise


def get_database(request: Request) -> Database:
    """Return the Database owned by the running application."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        msg = "Database not initialized. The application lifespan has not run."
        raise RuntimeError(msg)
    return database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session (FastAPI dependency)."""
    async with get_database(request).session() as session:
        yield session
