"""Answer API tests: public submission, scoring and owner views."""

import uuid
from unittest.mock import patch

import pytest

from quizflow.models.answer import Answer, AnswerStatus
from quizflow.models.paper import PaperStatus
from quizflow.schemas.answer import MAX_TIME_SPENT_SECONDS
from tests.helpers.factories import create_answer, create_paper, create_question
from tests.helpers.fake_redis import FakeRedis


@pytest.fixture
def quiz(db, teacher):
    single = create_question(db, teacher, content="2 + 2?", answer="4", points=10)
    multiple = create_question(
        db,
        teacher,
        type="multiple",
        content="Even numbers?",
        options=["1", "2", "3", "4"],
        answer=["2", "4"],
        points=5,
    )
    essay = create_question(
        db, teacher, type="essay", content="Explain.", options=None, answer="Reference", points=20
    )
    paper = create_paper(
        db, teacher, [single, multiple, essay], status=PaperStatus.PUBLISHED, quiz_code="QUIZ23"
    )
    return paper, single, multiple, essay


def _submit(client, **overrides):
    payload = {"quiz_code": "QUIZ23", "student_name": "Ann", "responses": {}, "time_spent": 120}
    payload.update(overrides)
    return client.post("/api/answers/submit", json=payload)


def test_submit_scores_and_stores(client, db, quiz):
    paper, single, multiple, essay = quiz
    responses = {str(single.id): "4", str(multiple.id): ["4", "2"], str(essay.id): "My essay"}

    response = _submit(client, student_email="ann@example.com", responses=responses)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["score"] == 15
    assert data["total_score"] == 35

    answer = db.query(Answer).filter(Answer.id == uuid.UUID(data["id"])).one()
    assert answer.status == AnswerStatus.COMPLETED.value
    assert answer.score == 15
    assert answer.total_score == 35
    assert answer.time_spent == 120
    assert answer.responses == responses
    assert (answer.submitted_at - answer.started_at).total_seconds() == pytest.approx(120)


def test_submit_includes_review_when_paper_shows_answers(client, quiz):
    paper, single, multiple, essay = quiz
    response = _submit(client, responses={str(single.id): "3"})

    review = response.json()["data"]["review"]
    assert [item["question_id"] for item in review] == [str(single.id), str(multiple.id), str(essay.id)]
    assert review[0]["response"] == "3"
    assert review[0]["correct_answer"] == "4"
    assert review[0]["is_correct"] is False
    assert review[1]["response"] is None


def test_submit_hides_review_when_disabled(client, db, teacher):
    question = create_question(db, teacher)
    create_paper(
        db, teacher, [question], status=PaperStatus.PUBLISHED, quiz_code="HIDE23",
        show_correct_answer=False,
    )
    response = _submit(client, quiz_code="HIDE23")
    assert response.status_code == 201
    assert response.json()["data"]["review"] is None


def test_quiz_code_is_normalized(client, quiz):
    response = _submit(client, quiz_code=" quiz23 ")
    assert response.status_code == 201


def test_submit_rejects_unknown_or_unpublished_code(client, db, teacher, quiz):
    assert _submit(client, quiz_code="NOPE23").json()["error"]["code"] == "INVALID_QUIZ_CODE"

    question = create_question(db, teacher)
    create_paper(db, teacher, [question], status=PaperStatus.ARCHIVED, quiz_code="OLD234")
    response = _submit(client, quiz_code="OLD234")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "INVALID_QUIZ_CODE"


def test_duplicate_submission_by_email(client, quiz):
    assert _submit(client, student_email="ann@example.com").status_code == 201

    response = _submit(client, student_email="ANN@example.com")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ANSWER_ALREADY_SUBMITTED"


def test_anonymous_submissions_are_not_deduplicated(client, quiz):
    assert _submit(client).status_code == 201
    assert _submit(client).status_code == 201


@pytest.mark.parametrize(
    "overrides",
    [
        {"time_spent": -1},
        {"time_spent": 1e11},
        {"time_spent": "Infinity"},
        {"time_spent": "NaN"},
        {"student_email": "not-an-email"},
        {"student_name": "x" * 51},
        {"quiz_code": ""},
        {"responses": {"q": 3}},
    ],
)
def test_submit_validation(client, quiz, overrides):
    response = _submit(client, **overrides)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_submit_is_rate_limited(client, quiz):
    redis = FakeRedis(ttl=90)
    redis.counts["rl:submit:ip:testclient"] = 30

    with patch("quizflow.core.rate_limit.get_redis_client", return_value=redis):
        response = _submit(client)

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "90"
    assert response.json()["error"]["code"] == "TOO_MANY_REQUESTS"


def test_owner_lists_answers_and_stats(client, db, teacher, other_teacher, auth_headers, quiz):
    paper = quiz[0]
    create_answer(db, paper, score=30, total_score=35, time_spent=100, student_email="a@example.com")
    create_answer(db, paper, score=10, total_score=35, time_spent=300, status=AnswerStatus.GRADED)
    create_answer(db, paper, score=0, total_score=35, status=AnswerStatus.IN_PROGRESS)
    headers = auth_headers(teacher)

    listing = client.get(f"/api/answers/paper/{paper.id}", headers=headers).json()["data"]
    assert listing["meta"]["total"] == 3

    graded = client.get(
        f"/api/answers/paper/{paper.id}", params={"status": "graded"}, headers=headers
    ).json()["data"]
    assert [a["score"] for a in graded["data"]] == [10]

    by_email = client.get(
        f"/api/answers/paper/{paper.id}", params={"student_email": "A@example.com"}, headers=headers
    ).json()["data"]
    assert by_email["meta"]["total"] == 1

    stats = client.get(f"/api/answers/paper/{paper.id}/stats", headers=headers).json()["data"]
    assert stats == {
        "total_answers": 3,
        "completed_count": 2,
        "average_score": 20.0,
        "average_time_spent": 200.0,
    }

    forbidden = client.get(f"/api/answers/paper/{paper.id}", headers=auth_headers(other_teacher))
    assert forbidden.status_code == 403


def test_get_answer_owner_only(client, db, teacher, other_teacher, auth_headers, quiz):
    answer = create_answer(db, quiz[0], score=5, total_score=35)

    response = client.get(f"/api/answers/{answer.id}", headers=auth_headers(teacher))
    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(answer.id)

    assert client.get(f"/api/answers/{answer.id}", headers=auth_headers(other_teacher)).status_code == 403
    assert client.get(f"/api/answers/{uuid.uuid4()}", headers=auth_headers(teacher)).status_code == 404


def test_manual_regrade(client, db, teacher, auth_headers, quiz):
    answer = create_answer(db, quiz[0], score=15, total_score=35)
    headers = auth_headers(teacher)

    response = client.patch(f"/api/answers/{answer.id}/score", json={"score": 32.5}, headers=headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["score"] == 32.5
    assert data["status"] == "graded"

    too_high = client.patch(f"/api/answers/{answer.id}/score", json={"score": 36}, headers=headers)
    assert too_high.status_code == 400
    assert too_high.json()["error"]["code"] == "VALIDATION_ERROR"

    negative = client.patch(f"/api/answers/{answer.id}/score", json={"score": -1}, headers=headers)
    assert negative.status_code == 400


def test_submit_accepts_longest_allowed_duration(client, db, quiz):
    response = _submit(client, time_spent=MAX_TIME_SPENT_SECONDS)

    assert response.status_code == 201
    answer = db.query(Answer).filter(Answer.id == uuid.UUID(response.json()["data"]["id"])).one()
    assert (answer.submitted_at - answer.started_at).days == 7
