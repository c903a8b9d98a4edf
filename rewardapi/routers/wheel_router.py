from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.wheel import SpinResponse, WheelResponse
from rewardapi.services.wheel_service import WheelService

router = APIRouter(prefix="/wheel", tags=["wheel"])


@router.get("", response_model=WheelResponse)
@inject
def get_wheel(
    wheel_service: WheelService = Depends(Provide[Container.services.wheel_service]),
) -> WheelResponse:
    """Slice table the client renders. ``slice_index`` in a spin result points into it."""
    return wheel_service.get_wheel()


@router.post("/spin", response_model=SpinResponse)
@inject
def spin_wheel(
    user_id: str = Depends(get_current_user_id),
    wheel_service: WheelService = Depends(Provide[Container.services.wheel_service]),
) -> SpinResponse:
    """
    Spin the wheel once for the current local day.

    HTTP Status:
        200: prize credited
        401: not logged in
        409: already spun today (SPIN_001)
        503: storage unavailable, safe to retry
    """
    return wheel_service.spin(user_id)
