import fastapi.testclient
import pytest

from app.bonus import models
from app.entrypoints.api import app


@pytest.fixture
def client():
    with fastapi.testclient.TestClient(app) as test_client:
        yield test_client


def test_claim_bonus_first_time(client):
    response = client.post(
        "/api/bonus/claim", headers={"x-forwarded-for": "203.0.113.7"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["alreadyClaimed"] is False
    assert body["bonusId"] in models.BONUS_IDS
    assert "claimedAt" in body


def test_claim_bonus_repeat_returns_same_bonus(client):
    headers = {"x-forwarded-for": "203.0.113.7, 10.0.0.1"}

    first = client.post("/api/bonus/claim", headers=headers).json()
    second = client.post(
        "/api/bonus/claim", headers={"x-forwarded-for": "203.0.113.7:5555"}
    ).json()

    assert second["alreadyClaimed"] is True
    assert second["bonusId"] == first["bonusId"]
    assert second["claimedAt"] == first["claimedAt"]


def test_claim_bonus_stores_user_agent(client, data_dir):
    client.post(
        "/api/bonus/claim",
        headers={"x-forwarded-for": "198.51.100.9", "user-agent": "TestPhone/1.0"},
    )

    content = (data_dir / "bonus-store.json").read_text(encoding="utf-8")
    assert "TestPhone/1.0" in content
