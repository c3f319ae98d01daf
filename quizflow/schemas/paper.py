"""Pydantic schemas for papers."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quizflow.models.paper import PaperStatus
from quizflow.schemas.question import QuestionOut, QuizQuestionOut


class PaperSettings(BaseModel):
    """Delivery settings of a paper."""

    time_limit: int | None = Field(None, ge=1, description="Time limit in minutes")
    shuffle_questions: bool = False
    shuffle_options: bool = False
    show_correct_answer: bool = True
    allow_review: bool = True


def _unique_ids(v: list[UUID] | None) -> list[UUID] | None:
    if v is not None and len(set(v)) != len(v):
        raise ValueError("question_ids must not contain duplicates")
    return v


class PaperCreate(BaseModel):
    """Request to create a paper."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    question_ids: list[UUID] = Field(default_factory=list, description="Ordered question ids")
    settings: PaperSettings = Field(default_factory=PaperSettings)
    status: PaperStatus = PaperStatus.DRAFT

    check_unique = field_validator("question_ids")(_unique_ids)


class PaperUpdate(BaseModel):
    """Partial paper update."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=1000)
    question_ids: list[UUID] | None = None
    settings: PaperSettings | None = None
    status: PaperStatus | None = None

    check_unique = field_validator("question_ids")(_unique_ids)


class PaperOut(BaseModel):
    """Paper response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str | None
    question_ids: list[UUID]
    settings: PaperSettings
    status: str
    quiz_code: str | None
    total_points: int
    created_at: datetime
    updated_at: datetime


class PaperDetailOut(PaperOut):
    """Paper with its ordered questions."""

    questions: list[QuestionOut]


class QuizPaperOut(BaseModel):
    """Public view of a published paper, served by quiz code."""

    id: UUID
    title: str
    description: str | None
    quiz_code: str
    settings: PaperSettings
    total_points: int
    question_count: int
    questions: list[QuizQuestionOut]
