"""
Tests for Goals / Accounts API endpoints
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from savings.api.deps import get_db
from savings.config import Settings, get_settings
from savings.infrastructure.db import session as session_module
from savings.main import app


@pytest.fixture
def client(db_engine):
    """Test client для FastAPI на in-memory SQLite"""
    SessionLocal = sessionmaker(bind=db_engine)

    def _get_test_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_settings] = lambda: Settings(DATABASE_URL="sqlite://", CURRENCY="USD")
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def with_accounts(client):
    response = client.put("/api/v1/accounts/", json={"accounts": [
        {"account_id": "acc-savings", "name": "Savings", "balance": "4000", "account_type": "savings"},
        {"account_id": "acc-checking", "name": "Checking", "balance": "3 000,00"},
    ]})
    assert response.status_code == 200
    return client


def _goal(client, goal_id):
    goals = client.get("/api/v1/goals/").json()["goals"]
    return next(g for g in goals if g["goal_id"] == goal_id)


def test_health(client):
    assert client.get("/health").text == "ok"


def test_ready_uses_sqlalchemy_engine(client, db_engine, monkeypatch):
    """/ready проверяет БД через engine сессий, а не по сырому DATABASE_URL"""
    monkeypatch.setattr(session_module, "_engine", db_engine)

    response = client.get("/ready")

    assert response.status_code == 200
    assert response.text == "ok"


def test_ready_fails_when_database_unreachable(monkeypatch):
    broken = create_engine("sqlite:////nonexistent-dir/savings.db")
    monkeypatch.setattr(session_module, "_engine", broken)

    response = TestClient(app, raise_server_exceptions=False).get("/ready")

    assert response.status_code == 500


def test_sync_and_list_accounts(with_accounts):
    accounts = with_accounts.get("/api/v1/accounts/").json()

    by_id = {a["account_id"]: a for a in accounts}
    assert by_id["acc-checking"]["balance"] == "3000.00"
    assert by_id["acc-savings"]["account_type"] == "savings"


def test_invalid_balance_rejected(client):
    response = client.put("/api/v1/accounts/", json={"accounts": [
        {"account_id": "a", "name": "A", "balance": "12.345"},
    ]})
    assert response.status_code == 422


def test_create_goal_and_overview(with_accounts):
    """Процентная привязка через API"""
    response = with_accounts.post("/api/v1/goals/", json={
        "name": "Emergency fund",
        "target_amount": "10000",
        "starting_balance": "0",
        "allocations": [
            {"account_id": "acc-savings", "allocation_type": "percentage", "allocation_value": "50"},
        ],
    })
    assert response.status_code == 200
    goal_id = response.json()["goal_id"]

    body = with_accounts.get("/api/v1/goals/").json()
    goal = body["goals"][0]
    assert goal["goal_id"] == goal_id
    assert goal["current_amount"] == "2000.00"
    assert goal["progress"] == "20.0"
    assert goal["remaining"] == "8000.00"
    assert goal["current_label"] == "$2,000"
    assert goal["progress_label"] == "20%"
    assert goal["days_remaining"] is None
    assert goal["on_track"] is None
    assert goal["pacing_label"] == ""
    assert goal["allocations"][0]["allocation_type"] == "percentage"
    assert body["total_saved"] == "2000.00"
    assert body["total_target"] == "10000.00"
    assert body["active_count"] == 1


def test_fixed_allocation_capped(with_accounts):
    """Фиксированная привязка ограничена балансом счёта"""
    goal_id = with_accounts.post("/api/v1/goals/", json={
        "name": "Car",
        "target_amount": "5000",
        "starting_balance": "1000",
        "allocations": [
            {"account_id": "acc-checking", "allocation_type": "fixed", "allocation_value": "10000"},
        ],
    }).json()["goal_id"]

    goal = _goal(with_accounts, goal_id)
    assert goal["current_amount"] == "3000.00"
    assert goal["progress"] == "50.0"


def test_create_goal_validation_error(with_accounts):
    response = with_accounts.post("/api/v1/goals/", json={
        "name": "X",
        "target_amount": "100",
        "allocations": [
            {"account_id": "acc-savings", "allocation_type": "percentage", "allocation_value": "150"},
        ],
    })
    assert response.status_code == 400
    assert "от 0 до 100" in response.json()["detail"]


def test_unknown_allocation_type_rejected(client):
    response = client.post("/api/v1/goals/", json={
        "name": "X",
        "target_amount": "100",
        "allocations": [{"account_id": "a", "allocation_type": "share", "allocation_value": "1"}],
    })
    assert response.status_code == 422


def test_update_and_clear_target_date(client):
    goal_id = client.post("/api/v1/goals/", json={
        "name": "Trip", "target_amount": "1200", "target_date": "2099-01-01",
    }).json()["goal_id"]
    assert _goal(client, goal_id)["target_date"] == "2099-01-01"

    assert client.patch(f"/api/v1/goals/{goal_id}", json={"name": "Big trip"}).status_code == 200
    goal = _goal(client, goal_id)
    assert goal["name"] == "Big trip"
    assert goal["target_date"] == "2099-01-01"
    assert goal["on_track"] is not None

    client.patch(f"/api/v1/goals/{goal_id}", json={"target_date": None})
    assert _goal(client, goal_id)["target_date"] is None


def test_set_allocations(with_accounts):
    goal_id = with_accounts.post("/api/v1/goals/", json={
        "name": "X", "target_amount": "10000", "starting_balance": "0",
    }).json()["goal_id"]

    response = with_accounts.put(f"/api/v1/goals/{goal_id}/allocations", json={"allocations": [
        {"account_id": "acc-savings", "allocation_type": "percentage", "allocation_value": "25"},
        {"account_id": "acc-checking", "allocation_type": "fixed", "allocation_value": "500"},
    ]})
    assert response.status_code == 200

    assert _goal(with_accounts, goal_id)["current_amount"] == "1500.00"


def test_complete_reopen_delete(client):
    goal_id = client.post("/api/v1/goals/", json={
        "name": "Done", "target_amount": "100", "starting_balance": "100",
    }).json()["goal_id"]
    assert _goal(client, goal_id)["is_ready_to_complete"] is True

    assert client.post(f"/api/v1/goals/{goal_id}/complete").status_code == 200
    goal = _goal(client, goal_id)
    assert goal["is_completed"] is True
    assert goal["completed_at"] is not None

    assert client.post(f"/api/v1/goals/{goal_id}/complete").status_code == 400
    assert client.post(f"/api/v1/goals/{goal_id}/reopen").status_code == 200
    assert client.delete(f"/api/v1/goals/{goal_id}").status_code == 200
    assert client.get("/api/v1/goals/").json()["goals"] == []


def test_unknown_goal_returns_404(client):
    assert client.post("/api/v1/goals/77/complete").status_code == 404
    assert client.delete("/api/v1/goals/77").status_code == 404
    assert client.patch("/api/v1/goals/77", json={"name": "x"}).status_code == 404
