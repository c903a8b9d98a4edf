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
from rewardapi.repositories.purchase_repository import PurchaseRepository
from rewardapi.repositories.user_repository import UserRepository
from rewardapi.schemas.store import PurchaseResponse, StoreCatalogResponse, StoreItem
from rewardapi.utils.timezone_utils import get_local_today

logger = logging.getLogger(__name__)


class StoreService:
    """Spend points on catalog items. Same debit rules as withdrawals."""

    def __init__(
        self,
        database: Database,
        settings: Settings,
        user_locks: UserLockRegistry,
    ):
        self.database = database
        self.settings = settings
        self.user_locks = user_locks

    def get_catalog(self) -> StoreCatalogResponse:
        items = [
            StoreItem(item=name, cost_points=cost)
            for name, cost in sorted(self.settings.STORE_ITEMS.items())
        ]
        return StoreCatalogResponse(items=items, total_count=len(items))

    def purchase(self, user_id: str, item: str) -> PurchaseResponse:
        cost = self.settings.STORE_ITEMS.get(item)
        if cost is None:
            raise ValidationError(f"Unknown store item: {item}", details={"item": item})

        today = get_local_today(self.settings.TIMEZONE)

        with self.user_locks.hold(user_id), self.database.session() as db:
            if UserRepository(db).lock_user(user_id) is None:
                raise NotFoundError("User not found")

            points_repo = PointsRepository(db)
            balance = points_repo.get_user_balance(user_id)
            if balance < cost:
                raise InsufficientBalanceError(
                    requested=cost,
                    available=balance,
                    message=f"Not enough points for {item}. Cost: {cost}, Available: {balance}",
                )

            purchase = PurchaseRepository(db).create(user_id, item, cost)
            points_repo.append(
                user_id,
                LedgerEventKind.PURCHASE,
                -cost,
                today,
                ref_id=f"purchase:{purchase.id}",
            )
            purchase_id = purchase.id
            purchased_at = purchase.created_at

        logger.info(f"User {user_id} purchased {item} for {cost} points")
        return PurchaseResponse(
            purchase_id=purchase_id,
            item=item,
            cost_points=cost,
            balance_after=balance - cost,
            purchased_at=purchased_at,
        )
