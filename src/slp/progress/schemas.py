"""Request/response schemas for progress, profile and leaderboard endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from slp.auth.schemas import ProfileUser


class ProgressIn(BaseModel):
    """A scenario attempt. The user is always taken from the access token."""

    scenario_id: int = Field(..., validation_alias=AliasChoices("scenarioId", "scenario_id"))
    choice_id: int | None = Field(None, validation_alias=AliasChoices("choiceId", "choice_id"))
    outcome: str | None = None


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(serialization_alias="userId")
    scenario_id: int = Field(serialization_alias="scenarioId")
    choice_id: int | None = Field(None, serialization_alias="choiceId")
    outcome: str | None = None
    created_at: datetime | None = None


class QuizScoreIn(BaseModel):
    lesson_id: int | None = Field(None, validation_alias=AliasChoices("lessonId", "lesson_id"))
    score: float = Field(..., ge=0, le=100)


class QuizScoreOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(serialization_alias="userId")
    lesson_id: int | None = Field(None, serialization_alias="lessonId")
    score: float
    created_at: datetime | None = None


class ProgressSummary(BaseModel):
    completed_lessons: int = Field(serialization_alias="completedLessons")
    completed_scenarios: int = Field(serialization_alias="completedScenarios")
    average_quiz_score: float = Field(serialization_alias="averageQuizScore")


class ProfileResponse(BaseModel):
    user: ProfileUser
    progress: ProgressSummary


class LeaderboardEntry(BaseModel):
    username: str
    completed_lessons: int
    completed_scenarios: int
    average_quiz_score: float | None = None
