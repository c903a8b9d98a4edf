from rewardapi.database.connection import Database
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.schemas.points import PointsBalanceResponse, PointsLedgerResponse


class PointService:
    """Read side of the points ledger"""

    def __init__(self, database: Database):
        self.database = database

    def get_user_balance(self, user_id: str) -> PointsBalanceResponse:
        with self.database.session() as db:
            balance = PointsRepository(db).get_user_balance(user_id)
        return PointsBalanceResponse(balance=balance)

    def get_user_ledger(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> PointsLedgerResponse:
        with self.database.session() as db:
            return PointsRepository(db).get_user_ledger(user_id, limit, offset)
