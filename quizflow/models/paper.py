"""Paper models."""

import uuid
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizflow.db.base import Base


class PaperStatus(str, Enum):
    """Paper status enum."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


DEFAULT_PAPER_SETTINGS = {
    "time_limit": None,
    "shuffle_questions": False,
    "shuffle_options": False,
    "show_correct_answer": True,
    "allow_review": True,
}


class Paper(Base):
    """An ordered set of questions with delivery settings."""

    __tablename__ = "papers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    settings = Column(JSON, nullable=False, default=lambda: dict(DEFAULT_PAPER_SETTINGS))
    status = Column(String(20), nullable=False, default=PaperStatus.DRAFT.value, index=True)
    quiz_code = Column(String(10), nullable=True, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    question_links = relationship(
        "PaperQuestion",
        back_populates="paper",
        cascade="all, delete-orphan",
        order_by="PaperQuestion.position",
    )
    answers = relationship("Answer", back_populates="paper", cascade="all")

    @property
    def question_ids(self) -> list[uuid.UUID]:
        return [link.question_id for link in self.question_links]

    @property
    def questions(self) -> list:
        """Questions in paper order."""
        return [link.question for link in self.question_links]

    @property
    def total_points(self) -> int:
        return sum(question.points for question in self.questions)


class PaperQuestion(Base):
    """Position of a question inside a paper."""

    __tablename__ = "paper_questions"

    paper_id = Column(Uuid, ForeignKey("papers.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(Uuid, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, nullable=False)

    paper = relationship("Paper", back_populates="question_links")
    question = relationship("Question", back_populates="paper_links", lazy="joined")
