"""Feedback model."""

import uuid
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.sql import func

from quizflow.db.base import Base


class FeedbackType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    QUESTION = "question"
    OTHER = "other"


class FeedbackStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Feedback(Base):
    """Product feedback, optionally linked to the signed-in submitter."""

    __tablename__ = "feedback"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    type = Column(String(20), nullable=False)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)
    user_email = Column(String(255), nullable=True)
    user_name = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=FeedbackStatus.PENDING.value, index=True)
    admin_response = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
