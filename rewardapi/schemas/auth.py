from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from rewardapi.schemas.user import UserSnapshot


class LoginPollStatus(str, Enum):
    PENDING = "pending"
    AUTHENTICATED = "authenticated"
    INVALID = "invalid"


class FulfillResult(str, Enum):
    OK = "ok"
    INVALID_TOKEN = "invalid_token"
    ALREADY_USED = "already_used"


class LoginStartRequest(BaseModel):
    referral_code: Optional[str] = Field(
        None, max_length=31, pattern=r"^[A-Za-z0-9]+$", description="Referrer's user id"
    )


class LoginStartResponse(BaseModel):
    token: str
    bot_url: str = Field(..., description="Telegram deep link that completes the login")
    poll_interval_seconds: int
    poll_timeout_seconds: int


class LoginPollRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=64)


class LoginPollResponse(BaseModel):
    status: LoginPollStatus
    user: Optional[UserSnapshot] = None
    access_token: Optional[str] = None
    token_type: Optional[str] = None


class TokenPayload(BaseModel):
    sub: str
