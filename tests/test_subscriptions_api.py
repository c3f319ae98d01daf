"""Plan and subscription API tests."""

from tests.helpers.factories import create_paper, create_question


def test_list_plans_is_public(client):
    response = client.get("/api/subscriptions/plans")

    assert response.status_code == 200
    plans = {plan["id"]: plan for plan in response.json()["data"]}
    assert plans["free"] == {"id": "free", "questions": 100, "papers": 10, "ai_enabled": False}
    assert plans["professional"]["questions"] == 1000
    assert plans["institution"]["papers"] == 1000
    assert plans["ai_enhanced"]["questions"] == 5000


def test_current_subscription_reports_usage(client, db, teacher, auth_headers):
    question = create_question(db, teacher)
    create_question(db, teacher)
    create_paper(db, teacher, [question])

    response = client.get("/api/subscriptions", headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["plan"] == "free"
    assert data["status"] == "active"
    assert data["limits"]["questions"] == 100
    assert data["usage"] == {"questions": 2, "papers": 1}


def test_subscription_requires_auth(client):
    assert client.get("/api/subscriptions").status_code == 401
