"""Pydantic schemas for answer submissions."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from quizflow.schemas.question import AnswerValue

# A week; longer values are client clock errors
MAX_TIME_SPENT_SECONDS = 7 * 24 * 3600


class AnswerSubmit(BaseModel):
    """Public submission payload."""

    quiz_code: str = Field(..., min_length=1, max_length=10, pattern=r"^[A-Z0-9]+$")
    student_name: str | None = Field(None, max_length=50)
    student_email: EmailStr | None = None
    responses: dict[str, AnswerValue] = Field(default_factory=dict)
    time_spent: float = Field(
        ..., ge=0, le=MAX_TIME_SPENT_SECONDS, allow_inf_nan=False, description="Seconds spent on the quiz"
    )

    @field_validator("quiz_code", mode="before")
    @classmethod
    def normalize_code(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


class ScoreUpdate(BaseModel):
    """Manual (re)grading of one submission."""

    score: float = Field(..., ge=0)


class QuestionReview(BaseModel):
    """Per-question outcome shown after submission."""

    question_id: UUID
    response: AnswerValue | None
    correct_answer: AnswerValue
    explanation: str | None
    is_correct: bool
    points: int


class SubmitResult(BaseModel):
    id: UUID
    score: float
    total_score: int
    submitted_at: datetime
    review: list[QuestionReview] | None = None


class AnswerOut(BaseModel):
    """Answer response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    paper_id: UUID
    student_name: str | None
    student_email: str | None
    responses: dict[str, AnswerValue]
    score: float
    total_score: int
    time_spent: float
    status: str
    started_at: datetime | None
    submitted_at: datetime | None
    created_at: datetime


class AnswerStats(BaseModel):
    total_answers: int
    completed_count: int
    average_score: float
    average_time_spent: float
