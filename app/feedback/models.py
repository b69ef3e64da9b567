import dataclasses
import datetime
import uuid


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Feedback:
    id: str = dataclasses.field(default_factory=lambda: str(uuid.uuid4()))
    message_ref: int | None = None
    rating: int
    department: str = ""
    comment: str = ""
    phone: str = ""
    urgent: bool = False
    created_at: datetime.datetime = dataclasses.field(default_factory=utc_now)
    updated_at: datetime.datetime | None = None

    def __post_init__(self):
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)


@dataclasses.dataclass(frozen=True, kw_only=True)
class VoiceRecording:
    filename: str
    content: bytes
