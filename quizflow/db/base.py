"""Database base and model registry."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def init_models() -> None:
    """Import every model module so the metadata is complete."""
    import quizflow.models  # noqa: F401
