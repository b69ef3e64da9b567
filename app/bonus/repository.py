import abc
import datetime
import logging

from app.bonus import models
from app.common import json_store

logger = logging.getLogger(__name__)


class AbstractBonusRepository(abc.ABC):
    @abc.abstractmethod
    async def get(self, client_key: str) -> models.BonusAssignment | None:
        """Get the assignment for a client, if one was made."""

    @abc.abstractmethod
    async def save_if_absent(
        self, assignment: models.BonusAssignment
    ) -> models.BonusAssignment:
        """Persist a new assignment unless the client already has one.

        Returns whichever assignment is stored for the client afterwards.
        """


def _has_bonus(bonus_doc: dict) -> bool:
    return bool(bonus_doc.get("bonusId"))


def _to_model(client_key: str, bonus_doc: dict) -> models.BonusAssignment:
    try:
        claimed_at = datetime.datetime.fromisoformat(bonus_doc["claimedAt"])
    except (KeyError, TypeError, ValueError):
        logger.warning(
            "Bonus assignment has no valid claim time",
            extra={"client_key": client_key},
        )
        claimed_at = datetime.datetime.fromtimestamp(0, datetime.UTC)

    return models.BonusAssignment(
        client_key=client_key,
        bonus_id=bonus_doc["bonusId"],
        claimed_at=claimed_at,
        client_meta=bonus_doc.get("ua") or "",
    )


class JsonBonusRepository(AbstractBonusRepository):
    def __init__(self, store: json_store.JsonDocumentStore):
        self.store = store

    async def get(self, client_key: str) -> models.BonusAssignment | None:
        bonus_doc = await self.store.get(client_key)

        if not bonus_doc or not _has_bonus(bonus_doc):
            return None

        return _to_model(client_key, bonus_doc)

    async def save_if_absent(
        self, assignment: models.BonusAssignment
    ) -> models.BonusAssignment:
        stored, _ = await self.store.insert_if_absent(
            assignment.client_key,
            {
                "bonusId": assignment.bonus_id,
                "claimedAt": assignment.claimed_at.isoformat(),
                "ua": assignment.client_meta,
            },
            is_present=_has_bonus,
        )
        return _to_model(assignment.client_key, stored)
