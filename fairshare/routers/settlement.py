from fastapi import APIRouter

from fairshare.models.settlement import SettlementOut, SettlementRequest
from fairshare.services.settlement import calculate_month

router = APIRouter(prefix="/settlement", tags=["settlement"])


@router.post(
    "/calculate",
    response_model=SettlementOut,
    summary="Settle unsaved month contents without storing anything",
)
async def calculate(payload: SettlementRequest):
    return SettlementOut.model_validate(calculate_month(payload.to_domain()))
