from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.referral import ReferralSummaryResponse
from rewardapi.services.referral_service import ReferralService

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.get("/me", response_model=ReferralSummaryResponse)
@inject
def get_my_referrals(
    user_id: str = Depends(get_current_user_id),
    referral_service: ReferralService = Depends(
        Provide[Container.services.referral_service]
    ),
) -> ReferralSummaryResponse:
    """The user's referral code, shareable bot link and how many people joined with it."""
    return referral_service.get_summary(user_id)
