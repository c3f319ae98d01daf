"""Feedback API tests."""

import uuid
from unittest.mock import patch

from quizflow.models.feedback import Feedback
from tests.helpers.fake_redis import FakeRedis

BUG = {"type": "bug", "title": "Timer stops", "content": "The timer froze on question 3", "rating": 2}


def test_anonymous_feedback(client, db):
    response = client.post("/api/feedback", json={**BUG, "user_email": "anon@example.com"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "pending"
    assert data["user_id"] is None
    assert data["user_email"] == "anon@example.com"


def test_signed_in_feedback_is_linked(client, teacher, auth_headers):
    response = client.post("/api/feedback", json=BUG, headers=auth_headers(teacher))
    data = response.json()["data"]
    assert data["user_id"] == str(teacher.id)
    assert data["user_email"] == "teacher@example.com"


def test_invalid_token_on_public_feedback_is_anonymous(client):
    response = client.post("/api/feedback", json=BUG, headers={"Authorization": "Bearer junk"})
    assert response.status_code == 201
    assert response.json()["data"]["user_id"] is None


def test_feedback_validation(client):
    for payload in (
        {**BUG, "rating": 6},
        {**BUG, "title": "x" * 101},
        {**BUG, "content": "x" * 2001},
        {**BUG, "type": "praise"},
    ):
        response = client.post("/api/feedback", json=payload)
        assert response.status_code == 400


def test_feedback_is_rate_limited(client):
    redis = FakeRedis(ttl=1200)
    redis.counts["rl:feedback:ip:testclient"] = 10

    with patch("quizflow.core.rate_limit.get_redis_client", return_value=redis):
        response = client.post("/api/feedback", json=BUG)

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "1200"


def test_rate_limit_counts_first_request(client):
    redis = FakeRedis()

    with patch("quizflow.core.rate_limit.get_redis_client", return_value=redis):
        response = client.post("/api/feedback", json=BUG)

    assert response.status_code == 201
    assert redis.counts == {"rl:feedback:ip:testclient": 1}
    assert redis.expiries == {"rl:feedback:ip:testclient": 3600}


def test_forwarded_header_does_not_reset_the_limit(client):
    redis = FakeRedis()

    with patch("quizflow.core.rate_limit.get_redis_client", return_value=redis):
        statuses = [
            client.post("/api/feedback", json=BUG, headers={"X-Forwarded-For": f"203.0.113.{i}"}).status_code
            for i in range(12)
        ]

    assert statuses == [201] * 10 + [429] * 2
    assert list(redis.counts) == ["rl:feedback:ip:testclient"]


def test_users_see_own_feedback_admins_see_all(client, teacher, other_teacher, admin, auth_headers):
    client.post("/api/feedback", json=BUG, headers=auth_headers(teacher))
    client.post("/api/feedback", json={**BUG, "type": "feature"}, headers=auth_headers(other_teacher))
    client.post("/api/feedback", json=BUG)

    own = client.get("/api/feedback", headers=auth_headers(teacher)).json()["data"]
    assert own["meta"]["total"] == 1

    everything = client.get("/api/feedback", headers=auth_headers(admin)).json()["data"]
    assert everything["meta"]["total"] == 3

    features = client.get(
        "/api/feedback", params={"type": "feature"}, headers=auth_headers(admin)
    ).json()["data"]
    assert features["meta"]["total"] == 1


def test_get_feedback_owner_or_admin(client, teacher, other_teacher, admin, auth_headers):
    feedback_id = client.post("/api/feedback", json=BUG, headers=auth_headers(teacher)).json()["data"]["id"]

    assert client.get(f"/api/feedback/{feedback_id}", headers=auth_headers(teacher)).status_code == 200
    assert client.get(f"/api/feedback/{feedback_id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/api/feedback/{feedback_id}", headers=auth_headers(other_teacher)).status_code == 403
    assert client.get(f"/api/feedback/{uuid.uuid4()}", headers=auth_headers(admin)).status_code == 404


def test_admin_triage(client, teacher, admin, auth_headers):
    feedback_id = client.post("/api/feedback", json=BUG, headers=auth_headers(teacher)).json()["data"]["id"]
    update = {"status": "resolved", "admin_response": "Fixed in 1.0.1"}

    forbidden = client.patch(f"/api/feedback/{feedback_id}", json=update, headers=auth_headers(teacher))
    assert forbidden.status_code == 403

    response = client.patch(f"/api/feedback/{feedback_id}", json=update, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "resolved"
    assert response.json()["data"]["admin_response"] == "Fixed in 1.0.1"


def test_delete_feedback(client, db, teacher, other_teacher, auth_headers):
    feedback_id = client.post("/api/feedback", json=BUG, headers=auth_headers(teacher)).json()["data"]["id"]

    assert client.delete(f"/api/feedback/{feedback_id}", headers=auth_headers(other_teacher)).status_code == 403
    assert client.delete(f"/api/feedback/{feedback_id}", headers=auth_headers(teacher)).status_code == 200

    db.expire_all()
    assert db.query(Feedback).count() == 0


def test_feedback_stats_admin_only(client, teacher, admin, auth_headers):
    client.post("/api/feedback", json={**BUG, "rating": 5})
    client.post("/api/feedback", json={**BUG, "rating": 2})
    feedback_id = client.post("/api/feedback", json={**BUG, "rating": None}).json()["data"]["id"]
    client.patch(f"/api/feedback/{feedback_id}", json={"status": "rejected"}, headers=auth_headers(admin))

    assert client.get("/api/feedback/stats", headers=auth_headers(teacher)).status_code == 403

    stats = client.get("/api/feedback/stats", headers=auth_headers(admin)).json()["data"]
    assert stats == {
        "total": 3,
        "pending": 2,
        "reviewed": 0,
        "resolved": 0,
        "rejected": 1,
        "avg_rating": 3.5,
    }
