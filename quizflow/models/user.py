"""User model.

Users live in the hosted identity provider; this table mirrors the subset the
API needs and is provisioned from token claims on first use.
"""

from enum import Enum

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.sql import func

from quizflow.db.base import Base


class UserRole(str, Enum):
    """User role enum."""

    TEACHER = "teacher"
    STUDENT = "student"
    ADMIN = "admin"


class PlanType(str, Enum):
    """Subscription plan enum."""

    FREE = "free"
    PROFESSIONAL = "professional"
    INSTITUTION = "institution"
    AI_ENHANCED = "ai_enhanced"


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True)  # identity provider subject
    email = Column(String(255), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.TEACHER.value)
    plan = Column(String(20), nullable=False, default=PlanType.FREE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
