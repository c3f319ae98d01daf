"""Answer (submission) model."""

import uuid
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizflow.db.base import Base


class AnswerStatus(str, Enum):
    """Answer status enum."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    GRADED = "graded"


# Statuses that count as a finished submission
FINISHED_STATUSES = (AnswerStatus.COMPLETED.value, AnswerStatus.GRADED.value)


class Answer(Base):
    """One student's submission against a paper."""

    __tablename__ = "answers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    paper_id = Column(Uuid, ForeignKey("papers.id", ondelete="CASCADE"), nullable=False, index=True)
    student_name = Column(String(50), nullable=True)
    student_email = Column(String(255), nullable=True, index=True)
    responses = Column(JSON, nullable=False, default=dict)
    score = Column(Float, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    time_spent = Column(Float, nullable=False, default=0)  # seconds
    status = Column(String(20), nullable=False, default=AnswerStatus.IN_PROGRESS.value, index=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    paper = relationship("Paper", back_populates="answers")
