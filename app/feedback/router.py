import logging

import fastapi
import pydantic

from app.common import errors
from app.feedback import api_schemas, dependencies, models, service

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/api", tags=["feedback"])

MAX_VOICE_FILES = 10
MAX_VOICE_FILE_BYTES = 12 * 1024 * 1024


async def _read_voices(form) -> list[models.VoiceRecording]:
    uploads = [item for item in form.getlist("voices") if hasattr(item, "read")]

    voices = []
    for upload in uploads:
        content = await upload.read()
        if len(content) > MAX_VOICE_FILE_BYTES:
            msg = "Voice recording is too large"
            raise errors.ValidationError(msg)

        voices.append(
            models.VoiceRecording(filename=upload.filename or "", content=content)
        )

    return voices


async def _parse_feedback_request(
    request: fastapi.Request,
) -> tuple[api_schemas.FeedbackRequest, list[models.VoiceRecording]]:
    content_type = request.headers.get("content-type", "")

    try:
        if content_type.startswith("multipart/form-data"):
            form = await request.form(max_files=MAX_VOICE_FILES)
            payload = api_schemas.FeedbackRequest.model_validate(
                {
                    key: form.get(key)
                    for key in ("rating", "department", "comment")
                    if isinstance(form.get(key), str)
                }
            )
            return payload, await _read_voices(form)

        body = await request.json()
        return api_schemas.FeedbackRequest.model_validate(body), []
    except ValueError as e:
        # pydantic.ValidationError and JSON decoding errors both land here
        detail = e.errors() if isinstance(e, pydantic.ValidationError) else None
        logger.info("Rejected feedback payload", extra={"detail": detail})
        msg = "Invalid feedback payload"
        raise errors.ValidationError(msg) from e


@router.post("/feedback", response_model=api_schemas.FeedbackResponse)
async def submit_feedback(
    request: fastapi.Request,
    feedback_service: service.FeedbackService = fastapi.Depends(
        dependencies.get_feedback_service
    ),
):
    payload, voices = await _parse_feedback_request(request)

    feedback_id = await feedback_service.create_feedback(
        rating=payload.rating,
        department=payload.department,
        comment=payload.comment,
        voices=voices,
    )

    return api_schemas.FeedbackResponse(feedback_id=feedback_id)


@router.post("/request-call", response_model=api_schemas.OkResponse)
async def request_call(
    request: api_schemas.RequestCallRequest,
    feedback_service: service.FeedbackService = fastapi.Depends(
        dependencies.get_feedback_service
    ),
):
    await feedback_service.attach_phone(request.feedback_id, request.phone)

    return api_schemas.OkResponse()
