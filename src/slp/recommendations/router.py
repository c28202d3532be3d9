"""Recommendations API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.dependencies import Identity, get_current_identity
from slp.config import get_settings
from slp.content.schemas import LessonOut, ScenarioOut
from slp.database import get_session
from slp.recommendations.schemas import RecommendationResponse
from slp.recommendations.service import RecommendationService

router = APIRouter(tags=["Recommendations"])


@router.get("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_session),
) -> RecommendationResponse:
    """Hardest not-yet-attempted lessons and scenarios within the caller's level."""
    svc = RecommendationService(db, limit=get_settings().recommendation_limit)
    recs = await svc.recommend(identity.id)
    return RecommendationResponse(
        level=recs.level,
        recommended_lessons=[LessonOut.model_validate(lesson) for lesson in recs.lessons],
        recommended_scenarios=[ScenarioOut.model_validate(s) for s in recs.scenarios],
    )
