"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from slp.auth.router import router as auth_router
from slp.config import Settings, get_settings
from slp.content.router import router as content_router
from slp.database import Database
from slp.feedback.router import router as feedback_router
from slp.health.router import router as health_router
from slp.middleware import setup_middleware
from slp.progress.router import router as progress_router
from slp.recommendations.router import router as recommendations_router

logger = structlog.get_logger()


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``database`` is given the caller owns it: the app uses it but does not
    dispose it at shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup and shutdown lifecycle."""
        owned = database is None
        app.state.database = database or Database.from_settings(settings)
        logger.info("database_pool_ready", pool_size=settings.db_pool_size)

        yield

        if owned:
            await app.state.database.dispose()
            logger.info("database_pool_closed")

    app = FastAPI(
        title="Scenario Learning Platform API",
        description="Lessons, branching scenarios, progress tracking and recommendations",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    if database is not None:
        app.state.database = database

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(content_router)
    app.include_router(progress_router)
    app.include_router(feedback_router)
    app.include_router(recommendations_router)

    return app


app = create_app()
