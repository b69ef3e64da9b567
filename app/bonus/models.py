import dataclasses
import datetime

# Order matters: the frontend resolves titles by these ids.
BONUS_IDS = ("lab10", "uziFree", "doc50", "checkup10")


@dataclasses.dataclass(frozen=True, kw_only=True)
class BonusAssignment:
    client_key: str
    bonus_id: str
    claimed_at: datetime.datetime
    client_meta: str = ""


@dataclasses.dataclass(frozen=True, kw_only=True)
class BonusClaim:
    bonus_id: str
    already_claimed: bool
    claimed_at: datetime.datetime
