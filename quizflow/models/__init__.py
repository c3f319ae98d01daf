"""Database models."""

# Import all models here so the metadata is complete
from quizflow.models.answer import Answer, AnswerStatus
from quizflow.models.feedback import Feedback, FeedbackStatus, FeedbackType
from quizflow.models.paper import Paper, PaperQuestion, PaperStatus
from quizflow.models.question import Difficulty, Question, QuestionTag, QuestionType
from quizflow.models.report import Report
from quizflow.models.user import PlanType, User, UserRole

__all__ = [
    "User",
    "UserRole",
    "PlanType",
    "Question",
    "QuestionTag",
    "QuestionType",
    "Difficulty",
    "Paper",
    "PaperQuestion",
    "PaperStatus",
    "Answer",
    "AnswerStatus",
    "Feedback",
    "FeedbackStatus",
    "FeedbackType",
    "Report",
]
