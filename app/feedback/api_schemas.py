import pydantic
import pydantic.alias_generators


class BaseRequestSchema(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=pydantic.alias_generators.to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FeedbackRequest(BaseRequestSchema):
    rating: int | float | str | None = pydantic.Field(
        default=None,
        description="Patient rating from 1 (worst) to 5 (best)",
        examples=[5],
    )
    department: str | None = pydantic.Field(
        default=None,
        description="Clinic department the feedback relates to",
        max_length=200,
        examples=["Qabulxona"],
    )
    comment: str | None = pydantic.Field(
        default=None,
        description="Free text feedback left by the patient",
        max_length=3000,
        examples=["Shifokor juda e'tiborli edi."],
    )


class FeedbackResponse(BaseRequestSchema):
    ok: bool = True
    feedback_id: str = pydantic.Field(
        description="Identifier used to attach a phone number later",
        serialization_alias="feedbackId",
    )


class RequestCallRequest(BaseRequestSchema):
    feedback_id: str | None = pydantic.Field(
        default=None,
        description="The ID returned when the feedback was submitted",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    phone: str | None = pydantic.Field(
        default=None,
        description="Phone number the clinic should call back",
        max_length=32,
        examples=["+998901234567"],
    )


class OkResponse(BaseRequestSchema):
    ok: bool = True
