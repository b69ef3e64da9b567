import abc
import datetime
import logging

from app.common import json_store
from app.feedback import models

logger = logging.getLogger(__name__)


class AbstractFeedbackRepository(abc.ABC):
    @abc.abstractmethod
    async def save(self, feedback: models.Feedback) -> None:
        """Save the feedback to the repository."""

    @abc.abstractmethod
    async def get(self, feedback_id: str) -> models.Feedback | None:
        """Get the feedback from the repository."""

    @abc.abstractmethod
    async def set_phone(
        self, feedback_id: str, phone: str, updated_at: datetime.datetime
    ) -> None:
        """Record the contact phone attached to an existing feedback."""


class JsonFeedbackRepository(AbstractFeedbackRepository):
    def __init__(self, store: json_store.JsonDocumentStore):
        self.store = store

    async def save(self, feedback: models.Feedback) -> None:
        await self.store.upsert(
            feedback.id,
            {
                "telegramMessageId": feedback.message_ref,
                "rating": feedback.rating,
                "department": feedback.department,
                "comment": feedback.comment,
                "phone": feedback.phone,
                "urgent": feedback.urgent,
                "createdAt": feedback.created_at.isoformat(),
                "updatedAt": feedback.updated_at.isoformat(),
            },
        )

    async def get(self, feedback_id: str) -> models.Feedback | None:
        feedback_doc = await self.store.get(feedback_id)

        if not feedback_doc:
            return None

        try:
            created_at = datetime.datetime.fromisoformat(feedback_doc["createdAt"])
            updated_at = feedback_doc.get("updatedAt")

            return models.Feedback(
                id=feedback_id,
                message_ref=feedback_doc.get("telegramMessageId"),
                rating=int(feedback_doc["rating"]),
                department=feedback_doc.get("department") or "",
                comment=feedback_doc.get("comment") or "",
                phone=feedback_doc.get("phone") or "",
                urgent=bool(feedback_doc.get("urgent", False)),
                created_at=created_at,
                updated_at=(
                    datetime.datetime.fromisoformat(updated_at)
                    if updated_at
                    else created_at
                ),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "Ignoring malformed feedback record", extra={"feedback_id": feedback_id}
            )
            return None

    async def set_phone(
        self, feedback_id: str, phone: str, updated_at: datetime.datetime
    ) -> None:
        await self.store.upsert(
            feedback_id, {"phone": phone, "updatedAt": updated_at.isoformat()}
        )
