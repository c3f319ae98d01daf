"""Tests for error classification and the error envelope."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from quizflow.core.app_exceptions import (
    AnswerAlreadySubmittedError,
    BusinessValidationError,
    ConflictError,
    InvalidQuizCodeError,
    PaperStatusError,
    PermissionDeniedError,
    QuotaExceededError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnauthorizedError,
)
from quizflow.core.errors import classify_database_error, error_code_for_status
from quizflow.main import create_app


class FakeDriverError(Exception):
    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


@pytest.mark.parametrize(
    "exc,status,code",
    [
        (QuotaExceededError("questions"), 402, "QUOTA_EXCEEDED"),
        (ResourceNotFoundError("Paper", "p1"), 404, "NOT_FOUND"),
        (PermissionDeniedError(), 403, "PERMISSION_DENIED"),
        (BusinessValidationError("bad"), 400, "VALIDATION_ERROR"),
        (ConflictError("taken"), 409, "CONFLICT"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (TooManyRequestsError(), 429, "TOO_MANY_REQUESTS"),
        (ServiceUnavailableError("Database"), 503, "SERVICE_UNAVAILABLE"),
        (PaperStatusError("publish", "archived"), 400, "INVALID_PAPER_STATUS"),
        (AnswerAlreadySubmittedError(), 409, "ANSWER_ALREADY_SUBMITTED"),
        (InvalidQuizCodeError(), 404, "INVALID_QUIZ_CODE"),
    ],
)
def test_business_error_table(exc, status, code):
    assert exc.status_code == status
    assert exc.code == code


def test_quota_exceeded_carries_resource():
    exc = QuotaExceededError("questions", limit=100)
    assert exc.details == {"resource": "questions", "limit": 100}


@pytest.mark.parametrize(
    "status,code",
    [(400, "BAD_REQUEST"), (404, "NOT_FOUND"), (405, "HTTP_405"), (503, "SERVICE_UNAVAILABLE")],
)
def test_error_code_for_status(status, code):
    assert error_code_for_status(status) == code


@pytest.mark.parametrize(
    "pgcode,status,code",
    [
        ("23505", 409, "DUPLICATE_ENTRY"),
        ("23503", 400, "FOREIGN_KEY_VIOLATION"),
        ("23502", 400, "NULL_VIOLATION"),
    ],
)
def test_classifier_prefers_sqlstate(pgcode, status, code):
    exc = IntegrityError("INSERT INTO papers", {}, FakeDriverError("opaque failure", pgcode))
    error = classify_database_error(exc)
    assert (error.status, error.code) == (status, code)


@pytest.mark.parametrize(
    "message,status,code",
    [
        ('duplicate key value violates unique constraint "papers_quiz_code_key"', 409, "DUPLICATE_ENTRY"),
        ("UNIQUE constraint failed: papers.quiz_code", 409, "DUPLICATE_ENTRY"),
        ("insert violates foreign key constraint", 400, "FOREIGN_KEY_VIOLATION"),
        ('null value in column "title" violates not-null constraint', 400, "NULL_VIOLATION"),
        ("PGRST116: JSON object requested, multiple rows returned", 400, "DATABASE_ERROR"),
        ("connection reset by peer", 500, "INTERNAL_ERROR"),
    ],
)
def test_classifier_falls_back_to_message_heuristics(message, status, code):
    error = classify_database_error(RuntimeError(message))
    assert (error.status, error.code) == (status, code)


@pytest.fixture
def error_client() -> TestClient:
    app = create_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.get("/quota")
    async def quota():
        raise QuotaExceededError("questions")

    @app.get("/db-down")
    async def db_down():
        raise OperationalError("SELECT 1", {}, FakeDriverError("could not connect"))

    @app.get("/slow-down")
    async def slow_down():
        raise TooManyRequestsError(retry_after_seconds=42)

    return TestClient(app, raise_server_exceptions=False)


def test_quota_error_envelope(error_client):
    response = error_client.get("/quota")
    assert response.status_code == 402
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "QUOTA_EXCEEDED"
    assert body["error"]["status"] == 402
    assert body["error"]["details"] == {"resource": "questions"}
    assert body["path"] == "/quota"
    assert "timestamp" in body


def test_unhandled_error_does_not_leak_details(error_client):
    response = error_client.get("/boom")
    assert response.status_code == 500
    body = response.json()
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "secret" not in body["error"]["message"]


def test_database_error_is_classified(error_client):
    response = error_client.get("/db-down")
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"


def test_rate_limit_sets_retry_after(error_client):
    response = error_client.get("/slow-down")
    assert response.status_code == 429
    assert response.headers["Retry-After"] == "42"
    assert response.json()["error"]["details"]["retry_after_seconds"] == 42


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/does-not-exist?x=1")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["path"] == "/api/does-not-exist?x=1"


def test_validation_error_has_field_details(client, teacher, auth_headers):
    response = client.post(
        "/api/questions",
        json={"type": "single", "content": "", "answer": "A", "points": 500},
        headers=auth_headers(teacher),
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {entry["field"] for entry in error["details"]["errors"]}
    assert "body.content" in fields
    assert "body.points" in fields
