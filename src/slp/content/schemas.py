"""Request/response schemas for lessons and scenarios.

Request bodies accept the front-end's camelCase keys as well as snake_case.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

_MEDIA_TYPE = AliasChoices("mediaType", "media_type")
_MEDIA_URL = AliasChoices("mediaUrl", "media_url")


# ---------------------------------------------------------------------------
# Lessons
# ---------------------------------------------------------------------------


class LessonIn(BaseModel):
    """Create or replace a lesson."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""
    media_type: str | None = Field(None, max_length=32, validation_alias=_MEDIA_TYPE)
    media_url: str | None = Field(None, max_length=1024, validation_alias=_MEDIA_URL)
    difficulty: int = Field(1, ge=0)


class LessonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    media_type: str | None = None
    media_url: str | None = None
    difficulty: int
    created_at: datetime | None = None


class LessonCompletionOut(BaseModel):
    lesson_id: int = Field(serialization_alias="lessonId")
    completed: bool = True
    already_completed: bool = Field(serialization_alias="alreadyCompleted")


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class ChoiceIn(BaseModel):
    """One branch offered by a scenario."""

    text: str = Field(..., min_length=1, validation_alias=AliasChoices("text", "choice_text"))
    outcome: str | None = None
    survivability: int | None = None


class ScenarioIn(BaseModel):
    """Create or replace a scenario together with its full list of choices."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    media_type: str | None = Field(None, max_length=32, validation_alias=_MEDIA_TYPE)
    media_url: str | None = Field(None, max_length=1024, validation_alias=_MEDIA_URL)
    difficulty: int = Field(1, ge=0)
    choices: list[ChoiceIn] = Field(default_factory=list)


class ChoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    choice_text: str
    outcome: str | None = None
    survivability: int | None = None


class ScenarioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    media_type: str | None = None
    media_url: str | None = None
    difficulty: int
    created_at: datetime | None = None
    choices: list[ChoiceOut] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    success: bool = True
