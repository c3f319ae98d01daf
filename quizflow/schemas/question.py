"""Pydantic schemas for the question bank."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from quizflow.models.question import CHOICE_TYPES, Difficulty, QuestionType

# Validation caps (input hardening)
CONTENT_MAX_LENGTH = 5000
EXPLANATION_MAX_LENGTH = 2000
OPTION_MAX_LENGTH = 500
TAG_MAX_LENGTH = 50

AnswerValue = str | list[str]


def check_question_shape(
    question_type: str, options: list[str] | None, answer: Any
) -> None:
    """Cross-field rules shared by create and (merged) update.

    Raises:
        ValueError: describing the first broken rule
    """
    if question_type in CHOICE_TYPES and len(options or []) < 2:
        raise ValueError("Choice questions need at least 2 options")
    if question_type == QuestionType.SINGLE.value and not isinstance(answer, str):
        raise ValueError("Single choice answer must be a single option")
    if question_type == QuestionType.MULTIPLE.value and not isinstance(answer, list):
        raise ValueError("Multiple choice answer must be a list of options")
    if isinstance(answer, list) and not answer:
        raise ValueError("Answer list must not be empty")


def _check_options(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    for option in v:
        if not option.strip():
            raise ValueError("Options must be non-empty")
        if len(option) > OPTION_MAX_LENGTH:
            raise ValueError(f"Options must be at most {OPTION_MAX_LENGTH} characters")
    return v


def _normalize_tags(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    tags = [tag.strip() for tag in v if tag and tag.strip()]
    if any(len(tag) > TAG_MAX_LENGTH for tag in tags):
        raise ValueError(f"Tags must be at most {TAG_MAX_LENGTH} characters")
    return list(dict.fromkeys(tags))


class QuestionBase(BaseModel):
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)
    options: list[str] | None = Field(None, description="Options for choice questions")
    answer: AnswerValue
    explanation: str | None = Field(None, max_length=EXPLANATION_MAX_LENGTH)
    tags: list[str] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.MEDIUM
    points: int = Field(default=1, ge=1, le=100)

    check_options = field_validator("options")(_check_options)
    check_tags = field_validator("tags")(_normalize_tags)


class QuestionCreate(QuestionBase):
    """Request to create a question."""

    type: QuestionType

    @model_validator(mode="after")
    def valid_shape(self) -> "QuestionCreate":
        check_question_shape(self.type.value, self.options, self.answer)
        return self


class QuestionUpdate(BaseModel):
    """Partial update; cross-field rules are re-checked against the merged question."""

    type: QuestionType | None = None
    content: str | None = Field(None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    options: list[str] | None = None
    answer: AnswerValue | None = None
    explanation: str | None = Field(None, max_length=EXPLANATION_MAX_LENGTH)
    tags: list[str] | None = None
    difficulty: Difficulty | None = None
    points: int | None = Field(None, ge=1, le=100)

    check_options = field_validator("options")(_check_options)
    check_tags = field_validator("tags")(_normalize_tags)


class QuestionOut(BaseModel):
    """Question response (includes the answer key)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    type: str
    content: str
    options: list[str] | None
    answer: AnswerValue
    explanation: str | None
    tags: list[str]
    difficulty: str
    points: int
    created_at: datetime
    updated_at: datetime


class QuizQuestionOut(BaseModel):
    """Question as shown to a student: no answer key, no explanation."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: str
    content: str
    options: list[str] | None
    points: int
    order: int
