from rewardapi.models.base import Base
from rewardapi.models.login_token import LoginToken, LoginTokenStatus
from rewardapi.models.points import LedgerEventKind, SpinEvent
from rewardapi.models.purchase import Purchase
from rewardapi.models.referral import ReferralEdge
from rewardapi.models.user import User
from rewardapi.models.withdrawal import WithdrawRequest, WithdrawStatusEnum

__all__ = [
    "Base",
    "LedgerEventKind",
    "LoginToken",
    "LoginTokenStatus",
    "Purchase",
    "ReferralEdge",
    "SpinEvent",
    "User",
    "WithdrawRequest",
    "WithdrawStatusEnum",
]
