import datetime
import logging
from collections.abc import Iterable, Sequence

from app.common import errors
from app.feedback import models, policy, repository
from app.telegram import relay

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def coerce_rating(value) -> int:
    """Accept ints and numeric strings in the 1-5 range."""
    if not value or isinstance(value, bool):
        msg = "Rating is required"
        raise errors.ValidationError(msg)

    try:
        number = float(value)
    except (TypeError, ValueError):
        msg = "Rating must be a number"
        raise errors.ValidationError(msg) from None

    if not number.is_integer() or not MIN_RATING <= number <= MAX_RATING:
        msg = f"Rating must be a whole number between {MIN_RATING} and {MAX_RATING}"
        raise errors.ValidationError(msg)

    return int(number)


class FeedbackService:
    def __init__(
        self,
        feedback_repository: repository.AbstractFeedbackRepository,
        message_relay: relay.AbstractMessageRelay,
        urgent_keywords: Iterable[str] = policy.DEFAULT_URGENT_KEYWORDS,
        department_tag_charset: str = policy.DEFAULT_DEPARTMENT_TAG_CHARSET,
    ):
        self.feedback_repository = feedback_repository
        self.message_relay = message_relay
        self.urgent_keywords = tuple(urgent_keywords)
        self.department_tag_charset = department_tag_charset

    async def create_feedback(
        self,
        rating,
        department: str | None = None,
        comment: str | None = None,
        voices: Sequence[models.VoiceRecording] = (),
    ) -> str:
        rating = coerce_rating(rating)
        department = department or ""
        comment = comment or ""

        text = policy.format_feedback_message(
            rating, department, comment, charset=self.department_tag_charset
        )
        message_ref = await self.message_relay.post_message(text)

        feedback = models.Feedback(
            message_ref=message_ref,
            rating=rating,
            department=department,
            comment=comment,
            urgent=policy.is_urgent(rating, comment, self.urgent_keywords),
        )
        await self.feedback_repository.save(feedback)

        logger.info(
            "Feedback submitted successfully",
            extra={
                "feedback_id": feedback.id,
                "rating": feedback.rating,
                "urgent": feedback.urgent,
                "voices": len(voices),
            },
        )

        for index, voice in enumerate(voices, start=1):
            await self.message_relay.send_voice(
                voice.content,
                voice.filename or f"voice-{index}.ogg",
                caption=f"🎤 Ovozli fikr #{index}",
                reply_to=message_ref,
            )

        return feedback.id

    async def attach_phone(self, feedback_id: str | None, phone: str | None) -> None:
        if not isinstance(feedback_id, str) or not feedback_id.strip():
            msg = "feedbackId is required"
            raise errors.ValidationError(msg)

        if not isinstance(phone, str) or not phone.strip():
            msg = "Phone number is required"
            raise errors.ValidationError(msg)

        phone = phone.strip()

        feedback = await self.feedback_repository.get(feedback_id)
        if feedback is None or not feedback.message_ref:
            msg = "Original message not found"
            raise errors.NotFoundError(msg)

        text = policy.format_feedback_message(
            feedback.rating,
            feedback.department,
            feedback.comment,
            phone,
            charset=self.department_tag_charset,
        )
        await self.message_relay.edit_message(feedback.message_ref, text)

        # updated_at must stay strictly after created_at
        updated_at = max(
            models.utc_now(),
            feedback.created_at + datetime.timedelta(microseconds=1),
        )
        await self.feedback_repository.set_phone(feedback_id, phone, updated_at)

        logger.info("Phone attached to feedback", extra={"feedback_id": feedback_id})
