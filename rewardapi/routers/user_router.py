from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.user import UserProfileWithPoints
from rewardapi.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserProfileWithPoints)
@inject
def get_me(
    user_id: str = Depends(get_current_user_id),
    user_service: UserService = Depends(Provide[Container.services.user_service]),
) -> UserProfileWithPoints:
    return user_service.get_profile(user_id)
