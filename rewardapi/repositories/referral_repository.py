from sqlalchemy.orm import Session

from rewardapi.models.referral import ReferralEdge


class ReferralRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_edge(self, referrer_id: str, referred_id: str) -> ReferralEdge:
        edge = ReferralEdge(referrer_id=referrer_id, referred_id=referred_id)
        self.db.add(edge)
        self.db.flush()
        return edge

    def count_referred(self, referrer_id: str) -> int:
        return (
            self.db.query(ReferralEdge)
            .filter(ReferralEdge.referrer_id == referrer_id)
            .count()
        )
