import logging

import fastapi

from app.bonus import api_schemas, dependencies, service

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/api/bonus", tags=["bonus"])


@router.post("/claim", response_model=api_schemas.BonusClaimResponse)
async def claim_bonus(
    request: fastapi.Request,
    client_key: str = fastapi.Depends(dependencies.get_request_client_key),
    bonus_service: service.BonusService = fastapi.Depends(
        dependencies.get_bonus_service
    ),
):
    claim = await bonus_service.claim_bonus(
        client_key, request.headers.get("user-agent", "")
    )

    return api_schemas.BonusClaimResponse(
        already_claimed=claim.already_claimed,
        bonus_id=claim.bonus_id,
        claimed_at=claim.claimed_at,
    )
