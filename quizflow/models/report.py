"""Report model."""

import uuid

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import backref, relationship
from sqlalchemy.sql import func

from quizflow.db.base import Base


class Report(Base):
    """Aggregated results of one paper. Regenerating overwrites the row."""

    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    paper_id = Column(
        Uuid, ForeignKey("papers.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    summary = Column(JSON, nullable=False, default=dict)
    chart_data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    paper = relationship(
        "Paper", backref=backref("report", uselist=False, cascade="all")
    )
