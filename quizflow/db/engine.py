"""Database engine configuration."""

import json

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from quizflow.core.config import settings


def _json_serializer(value) -> str:
    # Keep non-ASCII question content readable in the database
    return json.dumps(value, ensure_ascii=False)


def create_db_engine(url: str | None = None) -> Engine:
    """Create SQLAlchemy engine."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        # Local runs and tests; in-memory databases must share one connection
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            json_serializer=_json_serializer,
            echo=False,
        )
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
        json_serializer=_json_serializer,
        echo=False,
    )


# Global engine instance
engine = create_db_engine()
