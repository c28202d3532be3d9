"""Response schema for the recommendations endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

from slp.content.schemas import LessonOut, ScenarioOut


class RecommendationResponse(BaseModel):
    level: int = Field(serialization_alias="userLevel")
    recommended_lessons: list[LessonOut] = Field(serialization_alias="recommendedLessons")
    recommended_scenarios: list[ScenarioOut] = Field(serialization_alias="recommendedScenarios")
