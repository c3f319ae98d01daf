"""Database session management."""

from typing import Generator

from sqlalchemy.orm import Session, sessionmaker

from quizflow.db.base import Base, init_models
from quizflow.db.engine import engine
from quizflow.core.logging import get_logger

logger = get_logger(__name__)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all tables (dev and test only; production schemas are managed by the DBA)."""
    init_models()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
