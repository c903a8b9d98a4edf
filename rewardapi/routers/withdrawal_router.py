from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.withdrawal import (
    WithdrawalCreateRequest,
    WithdrawalResponse,
    WithdrawHistoryResponse,
)
from rewardapi.services.withdrawal_service import WithdrawalService

router = APIRouter(prefix="/withdrawals", tags=["withdrawals"])


@router.post("", response_model=WithdrawalResponse)
@inject
def request_withdrawal(
    request: WithdrawalCreateRequest,
    user_id: str = Depends(get_current_user_id),
    withdrawal_service: WithdrawalService = Depends(
        Provide[Container.services.withdrawal_service]
    ),
) -> WithdrawalResponse:
    """
    Create a pending withdrawal and debit the points immediately.

    HTTP Status:
        200: request created
        400: insufficient balance (BALANCE_001)
        401: not logged in
        422: missing address or below the minimum (VALIDATION_001)
    """
    return withdrawal_service.request_withdrawal(
        user_id, request.destination_address, request.points
    )


@router.get("/history", response_model=WithdrawHistoryResponse)
@inject
def get_withdrawal_history(
    user_id: str = Depends(get_current_user_id),
    withdrawal_service: WithdrawalService = Depends(
        Provide[Container.services.withdrawal_service]
    ),
) -> WithdrawHistoryResponse:
    return withdrawal_service.list_history(user_id)
