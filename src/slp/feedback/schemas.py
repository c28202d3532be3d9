"""Request/response schemas for feedback."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class FeedbackIn(BaseModel):
    content_type: Literal["lesson", "scenario"] = Field(
        ..., validation_alias=AliasChoices("contentType", "content_type")
    )
    content_id: int = Field(..., validation_alias=AliasChoices("contentId", "content_id"))
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(serialization_alias="userId")
    content_type: str = Field(serialization_alias="contentType")
    content_id: int = Field(serialization_alias="contentId")
    rating: int
    comment: str | None = None
    created_at: datetime | None = None
