"""Pytest configuration and shared fixtures."""

import os

# Must be set before the application modules read their settings
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-quizflow-tests-0123456789"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["REDIS_ENABLED"] = "false"
os.environ["AI_API_KEY"] = ""

from collections.abc import Callable, Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from quizflow.db.base import Base, init_models  # noqa: E402
from quizflow.db.engine import engine  # noqa: E402
from quizflow.db.session import SessionLocal  # noqa: E402
from quizflow.main import app  # noqa: E402
from quizflow.models.user import PlanType, User, UserRole  # noqa: E402
from tests.helpers.factories import create_user, make_auth_headers  # noqa: E402


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    """Fresh in-memory schema for every test."""
    init_models()
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def teacher(db) -> User:
    return create_user(db, email="teacher@example.com", name="Teacher One")


@pytest.fixture
def other_teacher(db) -> User:
    return create_user(db, email="other@example.com", name="Teacher Two")


@pytest.fixture
def admin(db) -> User:
    return create_user(db, email="admin@example.com", role=UserRole.ADMIN, plan=PlanType.INSTITUTION)


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    return make_auth_headers
