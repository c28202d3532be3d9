"""Feedback service: ratings and comments on lessons and scenarios."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.database import atomic
from slp.db.models import Feedback, Lesson, Scenario
from slp.errors import NotFoundError

logger = structlog.get_logger()

_CONTENT_MODELS = {"lesson": Lesson, "scenario": Scenario}


async def submit_feedback(
    db: AsyncSession,
    user_id: int,
    content_type: str,
    content_id: int,
    rating: int,
    comment: str | None = None,
) -> Feedback:
    """Store feedback for an existing lesson or scenario."""
    async with atomic(db):
        if await db.get(_CONTENT_MODELS[content_type], content_id) is None:
            raise NotFoundError(f"{content_type.capitalize()} not found")
        feedback = Feedback(
            user_id=user_id,
            content_type=content_type,
            content_id=content_id,
            rating=rating,
            comment=comment,
        )
        db.add(feedback)
        await db.flush()

    logger.info("feedback_submitted", feedback_id=feedback.id, content_type=content_type, rating=rating)
    return feedback


async def list_feedback(
    db: AsyncSession,
    content_type: str | None = None,
    content_id: int | None = None,
) -> list[Feedback]:
    stmt = select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc())
    if content_type is not None:
        stmt = stmt.where(Feedback.content_type == content_type)
    if content_id is not None:
        stmt = stmt.where(Feedback.content_id == content_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())
