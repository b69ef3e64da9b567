import datetime
import logging
import random
from collections.abc import Sequence

from app.bonus import models, repository

logger = logging.getLogger(__name__)


class BonusService:
    def __init__(
        self,
        bonus_repository: repository.AbstractBonusRepository,
        bonus_ids: Sequence[str] = models.BONUS_IDS,
        rng: random.Random | None = None,
    ):
        self.bonus_repository = bonus_repository
        self.bonus_ids = tuple(bonus_ids)
        self.rng = rng or random.SystemRandom()

    async def claim_bonus(
        self, client_key: str, client_meta: str = ""
    ) -> models.BonusClaim:
        """Assign a bonus the first time a client asks; replay it afterwards."""
        existing = await self.bonus_repository.get(client_key)
        if existing is not None:
            logger.info("Bonus already claimed", extra={"client_key": client_key})
            return models.BonusClaim(
                bonus_id=existing.bonus_id,
                already_claimed=True,
                claimed_at=existing.claimed_at,
            )

        candidate = models.BonusAssignment(
            client_key=client_key,
            bonus_id=self.rng.choice(self.bonus_ids),
            claimed_at=datetime.datetime.now(datetime.UTC),
            client_meta=client_meta or "",
        )
        stored = await self.bonus_repository.save_if_absent(candidate)

        # Another request for the same client may have won the race
        already_claimed = stored != candidate

        logger.info(
            "Bonus claimed",
            extra={
                "client_key": client_key,
                "bonus_id": stored.bonus_id,
                "already_claimed": already_claimed,
            },
        )

        return models.BonusClaim(
            bonus_id=stored.bonus_id,
            already_claimed=already_claimed,
            claimed_at=stored.claimed_at,
        )
