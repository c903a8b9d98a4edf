from typing import List

from sqlalchemy import desc
from sqlalchemy.orm import Session

from rewardapi.models.withdrawal import WithdrawRequest as WithdrawRequestModel, WithdrawStatusEnum
from rewardapi.schemas.withdrawal import WithdrawRequestItem
from rewardapi.repositories.base import BaseRepository


class WithdrawalRepository(BaseRepository[WithdrawRequestModel, WithdrawRequestItem]):
    def __init__(self, db: Session):
        super().__init__(WithdrawRequestModel, WithdrawRequestItem, db)

    def create_pending(
        self, user_id: str, points: int, destination_address: str
    ) -> WithdrawRequestModel:
        return self.create(
            user_id=user_id,
            points=points,
            destination_address=destination_address,
            status=WithdrawStatusEnum.PENDING.value,
        )

    def list_for_user(self, user_id: str) -> List[WithdrawRequestItem]:
        """Newest first. id breaks ties between requests in the same second."""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.created_at), desc(self.model_class.id))
            .all()
        )
        return self.list_schemas(model_instances)
