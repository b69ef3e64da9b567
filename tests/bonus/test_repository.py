import datetime
import json

import pytest

from app.bonus import models, repository
from app.common import json_store


@pytest.fixture
def store_path(data_dir):
    return data_dir / "bonus-store.json"


@pytest.fixture
def json_repository(store_path):
    return repository.JsonBonusRepository(json_store.JsonDocumentStore(store_path))


def make_assignment(bonus_id="lab10", client_key="203.0.113.7"):
    return models.BonusAssignment(
        client_key=client_key,
        bonus_id=bonus_id,
        claimed_at=datetime.datetime(2026, 5, 1, 12, 0, tzinfo=datetime.UTC),
        client_meta="Mozilla/5.0",
    )


@pytest.mark.asyncio
async def test_save_if_absent_writes_document(json_repository, store_path):
    assignment = make_assignment()

    stored = await json_repository.save_if_absent(assignment)

    assert stored == assignment
    assert json.loads(store_path.read_text(encoding="utf-8")) == {
        "203.0.113.7": {
            "bonusId": "lab10",
            "claimedAt": "2026-05-01T12:00:00+00:00",
            "ua": "Mozilla/5.0",
        }
    }


@pytest.mark.asyncio
async def test_save_if_absent_keeps_first_assignment(json_repository):
    first = make_assignment("lab10")
    await json_repository.save_if_absent(first)

    stored = await json_repository.save_if_absent(make_assignment("doc50"))

    assert stored == first
    assert (await json_repository.get("203.0.113.7")).bonus_id == "lab10"


@pytest.mark.asyncio
async def test_get_returns_none_for_unknown_client(json_repository):
    assert await json_repository.get("198.51.100.1") is None


@pytest.mark.asyncio
async def test_get_tolerates_missing_claim_time(json_repository, store_path):
    store_path.write_text(
        json.dumps({"203.0.113.7": {"bonusId": "uziFree"}}), encoding="utf-8"
    )

    assignment = await json_repository.get("203.0.113.7")

    assert assignment.bonus_id == "uziFree"
    assert assignment.claimed_at.tzinfo is not None


@pytest.mark.asyncio
async def test_entry_without_bonus_id_is_replaced(json_repository, store_path):
    store_path.write_text(
        json.dumps({"203.0.113.7": {"ua": "x"}}), encoding="utf-8"
    )

    assert await json_repository.get("203.0.113.7") is None

    stored = await json_repository.save_if_absent(make_assignment("doc50"))

    assert stored.bonus_id == "doc50"
    assert (await json_repository.get("203.0.113.7")).bonus_id == "doc50"
