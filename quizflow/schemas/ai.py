"""Pydantic schemas for AI question drafting."""

from pydantic import BaseModel, Field

from quizflow.core.config import settings
from quizflow.models.question import QuestionType
from quizflow.schemas.question import QuestionCreate


class GenerateQuestionsRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=4000, description="Source material or topic")
    count: int = Field(default=5, ge=1, le=settings.AI_MAX_QUESTIONS)
    type: QuestionType = QuestionType.SINGLE


class GeneratedQuestions(BaseModel):
    """Drafts ready to be reviewed and saved through the questions API."""

    questions: list[QuestionCreate]
    requested: int
    discarded: int = Field(..., description="Drafts dropped because they failed validation")
