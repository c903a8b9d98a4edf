import logging

from rewardapi.config import Settings
from rewardapi.core.exceptions import (
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from rewardapi.database.connection import Database
from rewardapi.database.locks import UserLockRegistry
from rewardapi.models.points import LedgerEventKind
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.repositories.user_repository import UserRepository
from rewardapi.repositories.withdrawal_repository import WithdrawalRepository
from rewardapi.schemas.withdrawal import (
    WithdrawalResponse,
    WithdrawHistoryResponse,
    WithdrawRequestItem,
)
from rewardapi.utils.timezone_utils import get_local_today

logger = logging.getLogger(__name__)


class WithdrawalService:
    """Withdrawal requests and their ledger debits.

    A request row and its negative ledger entry are written in the same
    transaction under the user's lock: either both exist or neither does,
    and two concurrent requests can never together overdraw the balance.
    """

    def __init__(
        self,
        database: Database,
        settings: Settings,
        user_locks: UserLockRegistry,
    ):
        self.database = database
        self.settings = settings
        self.user_locks = user_locks

    def _validate(self, destination_address: str, points: int) -> str:
        address = (destination_address or "").strip()
        if not address:
            raise ValidationError("Destination address is required.")

        minimum = self.settings.MIN_WITHDRAWAL
        if isinstance(points, bool) or not isinstance(points, int) or points < minimum:
            raise ValidationError(
                f"Minimum withdrawal is {minimum} points.",
                details={"minimum": minimum},
            )
        return address

    def request_withdrawal(
        self, user_id: str, destination_address: str, points: int
    ) -> WithdrawalResponse:
        address = self._validate(destination_address, points)
        today = get_local_today(self.settings.TIMEZONE)

        with self.user_locks.hold(user_id), self.database.session() as db:
            if UserRepository(db).lock_user(user_id) is None:
                raise NotFoundError("User not found")

            points_repo = PointsRepository(db)
            balance = points_repo.get_user_balance(user_id)
            if balance < points:
                raise InsufficientBalanceError(requested=points, available=balance)

            request = WithdrawalRepository(db).create_pending(user_id, points, address)
            points_repo.append(
                user_id,
                LedgerEventKind.WITHDRAWAL,
                -points,
                today,
                ref_id=f"withdrawal:{request.id}",
            )
            item = WithdrawRequestItem.model_validate(request)

        logger.info(
            f"Withdrawal request {item.id} created for user {user_id}: {points} points"
        )
        return WithdrawalResponse(
            message="Withdrawal request submitted successfully!",
            request=item,
            balance_after=balance - points,
        )

    def list_history(self, user_id: str) -> WithdrawHistoryResponse:
        with self.database.session() as db:
            history = WithdrawalRepository(db).list_for_user(user_id)
        return WithdrawHistoryResponse(history=history)
