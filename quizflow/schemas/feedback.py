"""Pydantic schemas for feedback."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from quizflow.models.feedback import FeedbackStatus, FeedbackType


class FeedbackCreate(BaseModel):
    """Request to submit feedback."""

    type: FeedbackType
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=2000)
    rating: int | None = Field(None, ge=1, le=5)
    user_email: EmailStr | None = None
    user_name: str | None = Field(None, max_length=100)


class FeedbackUpdate(BaseModel):
    """Admin triage of a feedback item."""

    status: FeedbackStatus | None = None
    admin_response: str | None = Field(None, max_length=2000)


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None
    type: str
    title: str
    content: str
    rating: int | None
    user_email: str | None
    user_name: str | None
    status: str
    admin_response: str | None
    created_at: datetime
    updated_at: datetime


class FeedbackStats(BaseModel):
    total: int
    pending: int
    reviewed: int
    resolved: int
    rejected: int
    avg_rating: float | None
