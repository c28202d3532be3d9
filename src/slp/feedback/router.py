"""Feedback API endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.dependencies import Identity, get_current_identity, require_admin
from slp.database import get_session
from slp.feedback.schemas import FeedbackIn, FeedbackOut
from slp.feedback.service import list_feedback, submit_feedback

router = APIRouter(tags=["Feedback"])


@router.post("/feedback", response_model=FeedbackOut, status_code=201)
async def post_feedback(
    body: FeedbackIn,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> FeedbackOut:
    """Rate a lesson or scenario (1-5) with an optional comment."""
    feedback = await submit_feedback(
        db,
        identity.id,
        content_type=body.content_type,
        content_id=body.content_id,
        rating=body.rating,
        comment=body.comment,
    )
    return FeedbackOut.model_validate(feedback)


@router.get("/feedback", response_model=list[FeedbackOut])
async def get_feedback(
    content_type: Literal["lesson", "scenario"] | None = Query(None, alias="contentType"),
    content_id: int | None = Query(None, alias="contentId"),
    _admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_session),
) -> list[FeedbackOut]:
    """Review submitted feedback, newest first. Administrators only."""
    rows = await list_feedback(db, content_type=content_type, content_id=content_id)
    return [FeedbackOut.model_validate(row) for row in rows]
