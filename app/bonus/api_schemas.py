import datetime

import pydantic
import pydantic.alias_generators


class BaseResponseSchema(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=pydantic.alias_generators.to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BonusClaimResponse(BaseResponseSchema):
    ok: bool = True
    already_claimed: bool = pydantic.Field(
        description="True when this client had already been assigned a bonus",
    )
    bonus_id: str = pydantic.Field(
        description="Opaque bonus identifier, resolved to a title by the frontend",
        examples=["lab10"],
    )
    claimed_at: datetime.datetime = pydantic.Field(
        description="When the bonus was first assigned to this client",
    )
