from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.points import PointsBalanceResponse, PointsLedgerResponse
from rewardapi.services.point_service import PointService

router = APIRouter(prefix="/points", tags=["points"])


@router.get("/balance", response_model=PointsBalanceResponse)
@inject
def get_my_balance(
    user_id: str = Depends(get_current_user_id),
    point_service: PointService = Depends(Provide[Container.services.point_service]),
) -> PointsBalanceResponse:
    return point_service.get_user_balance(user_id)


@router.get("/ledger", response_model=PointsLedgerResponse)
@inject
def get_my_ledger(
    limit: int = Query(50, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    user_id: str = Depends(get_current_user_id),
    point_service: PointService = Depends(Provide[Container.services.point_service]),
) -> PointsLedgerResponse:
    """
    Ledger entries, newest first.

    Usage:
        GET /points/ledger?limit=20&offset=0
        GET /points/ledger?limit=10&offset=20
    """
    return point_service.get_user_ledger(user_id=user_id, limit=limit, offset=offset)
