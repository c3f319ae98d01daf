"""Question bank models."""

import uuid
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizflow.db.base import Base


class QuestionType(str, Enum):
    """Question type enum."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    FILL = "fill"
    ESSAY = "essay"


class Difficulty(str, Enum):
    """Question difficulty enum."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


CHOICE_TYPES = (QuestionType.SINGLE.value, QuestionType.MULTIPLE.value)


class Question(Base):
    """A question owned by one user.

    ``answer`` is a string for single/fill/essay questions and a list of
    strings for multiple-choice questions.
    """

    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)
    answer = Column(JSON, nullable=False)
    explanation = Column(Text, nullable=True)
    difficulty = Column(String(20), nullable=False, default=Difficulty.MEDIUM.value)
    points = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    tag_links = relationship(
        "QuestionTag",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionTag.position",
    )
    paper_links = relationship("PaperQuestion", back_populates="question", cascade="all")

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]

    @tags.setter
    def tags(self, values: list[str]) -> None:
        # Reuse surviving rows; the unit of work inserts before it deletes
        existing = {link.tag: link for link in self.tag_links}
        links = []
        for position, tag in enumerate(dict.fromkeys(values or [])):
            link = existing.get(tag) or QuestionTag(tag=tag)
            link.position = position
            links.append(link)
        self.tag_links = links


class QuestionTag(Base):
    """Tag attached to a question (queried for tag filters and the tag list)."""

    __tablename__ = "question_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(
        Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tag = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    question = relationship("Question", back_populates="tag_links")

    __table_args__ = (UniqueConstraint("question_id", "tag", name="uq_question_tag"),)
