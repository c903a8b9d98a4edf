# Repository layer - data access, flush only; services own the transaction

from .base import BaseRepository
from .user_repository import UserRepository
from .login_token_repository import LoginTokenRepository
from .points_repository import PointsRepository
from .referral_repository import ReferralRepository
from .withdrawal_repository import WithdrawalRepository
from .purchase_repository import PurchaseRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "LoginTokenRepository",
    "PointsRepository",
    "ReferralRepository",
    "WithdrawalRepository",
    "PurchaseRepository",
]
