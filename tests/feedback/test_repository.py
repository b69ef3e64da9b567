import datetime
import json

import pytest

from app.common import json_store
from app.feedback import models, repository


@pytest.fixture
def store_path(data_dir):
    return data_dir / "feedback-map.json"


@pytest.fixture
def json_repository(store_path):
    return repository.JsonFeedbackRepository(json_store.JsonDocumentStore(store_path))


@pytest.mark.asyncio
async def test_save_stores_feedback_with_all_fields(json_repository, store_path):
    created_at = datetime.datetime(2026, 3, 1, 9, 30, tzinfo=datetime.UTC)
    feedback = models.Feedback(
        id="fb-1",
        message_ref=501,
        rating=2,
        department="Lab",
        comment="Slow service",
        urgent=True,
        created_at=created_at,
    )

    await json_repository.save(feedback)

    document = json.loads(store_path.read_text(encoding="utf-8"))
    assert document == {
        "fb-1": {
            "telegramMessageId": 501,
            "rating": 2,
            "department": "Lab",
            "comment": "Slow service",
            "phone": "",
            "urgent": True,
            "createdAt": created_at.isoformat(),
            "updatedAt": created_at.isoformat(),
        }
    }


@pytest.mark.asyncio
async def test_save_and_get_roundtrip(json_repository):
    original = models.Feedback(
        message_ref=77, rating=5, department="Reception", comment="great"
    )

    await json_repository.save(original)
    retrieved = await json_repository.get(original.id)

    assert retrieved == original


@pytest.mark.asyncio
async def test_get_returns_none_when_feedback_not_found(json_repository):
    assert await json_repository.get("does-not-exist") is None


@pytest.mark.asyncio
async def test_get_ignores_malformed_record(json_repository, store_path):
    store_path.write_text(json.dumps({"bad": {"rating": "x"}}), encoding="utf-8")

    assert await json_repository.get("bad") is None


@pytest.mark.asyncio
async def test_get_reads_record_without_optional_fields(json_repository, store_path):
    store_path.write_text(
        json.dumps(
            {
                "old": {
                    "telegramMessageId": 9,
                    "rating": 4,
                    "createdAt": "2026-01-01T00:00:00+00:00",
                }
            }
        ),
        encoding="utf-8",
    )

    feedback = await json_repository.get("old")

    assert feedback.message_ref == 9
    assert feedback.department == ""
    assert feedback.phone == ""
    assert feedback.urgent is False
    assert feedback.updated_at == feedback.created_at


@pytest.mark.asyncio
async def test_set_phone_updates_only_phone_and_timestamp(json_repository):
    feedback = models.Feedback(message_ref=77, rating=5, comment="great")
    await json_repository.save(feedback)
    updated_at = feedback.created_at + datetime.timedelta(minutes=1)

    await json_repository.set_phone(feedback.id, "+998901234567", updated_at)
    retrieved = await json_repository.get(feedback.id)

    assert retrieved.phone == "+998901234567"
    assert retrieved.updated_at == updated_at
    assert retrieved.created_at == feedback.created_at
    assert retrieved.rating == 5
    assert retrieved.comment == "great"
    assert retrieved.message_ref == 77
