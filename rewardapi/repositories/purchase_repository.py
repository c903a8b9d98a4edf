from sqlalchemy.orm import Session

from rewardapi.models.purchase import Purchase


class PurchaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, item: str, points: int) -> Purchase:
        purchase = Purchase(user_id=user_id, item=item, points=points)
        self.db.add(purchase)
        self.db.flush()
        self.db.refresh(purchase)
        return purchase
