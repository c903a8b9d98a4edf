import logging
from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends

from rewardapi.containers import Container
from rewardapi.schemas.auth import (
    LoginPollRequest,
    LoginPollResponse,
    LoginStartRequest,
    LoginStartResponse,
)
from rewardapi.services.login_service import LoginService

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/telegram/start", response_model=LoginStartResponse)
@inject
def start_telegram_login(
    request: Optional[LoginStartRequest] = Body(None),
    login_service: LoginService = Depends(Provide[Container.services.login_service]),
) -> LoginStartResponse:
    """Issue a one-time login token and the bot deep link that completes it.

    The client opens ``bot_url`` and then polls ``/auth/telegram/poll``
    every ``poll_interval_seconds`` until it gets a final status or
    ``poll_timeout_seconds`` elapse.
    """
    referral_code = request.referral_code if request else None
    return login_service.start_login(referral_code)


@router.post("/telegram/poll", response_model=LoginPollResponse)
@inject
def poll_telegram_login(
    request: LoginPollRequest,
    login_service: LoginService = Depends(Provide[Container.services.login_service]),
) -> LoginPollResponse:
    """pending -> keep polling; authenticated -> session issued once; invalid -> stop."""
    return login_service.poll_login(request.token)
