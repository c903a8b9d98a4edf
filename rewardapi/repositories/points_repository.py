"""
Points ledger repository.

All balance reads go through ``get_user_balance``, which sums the ledger.
Every write is an append with a unique ``ref_id``; a duplicate key raises
``IntegrityError`` and is how concurrent duplicates (a second spin on the same
day, a second referral credit) are rejected by the database itself.
"""

from datetime import date
from typing import Optional

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from rewardapi.models.points import LedgerEventKind, SpinEvent as SpinEventModel
from rewardapi.schemas.points import PointsLedgerEntry, PointsLedgerResponse
from rewardapi.repositories.base import BaseRepository


class PointsRepository(BaseRepository[SpinEventModel, PointsLedgerEntry]):
    def __init__(self, db: Session):
        super().__init__(SpinEventModel, PointsLedgerEntry, db)

    def _to_ledger_entry(self, model_instance: SpinEventModel) -> PointsLedgerEntry:
        delta_points = model_instance.points
        return PointsLedgerEntry(
            id=model_instance.id,
            kind=model_instance.kind,
            transaction_type="CREDIT" if delta_points > 0 else "DEBIT",
            delta_points=delta_points,
            ref_id=model_instance.ref_id,
            ledger_day=model_instance.ledger_day.isoformat(),
            created_at=(
                model_instance.created_at.strftime("%Y-%m-%d %H:%M:%S")
                if model_instance.created_at
                else ""
            ),
        )

    def get_user_balance(self, user_id: str) -> int:
        """Balance = SUM of every ledger delta for the user (0 when empty)."""
        result = self.db.scalar(
            select(func.coalesce(func.sum(SpinEventModel.points), 0)).where(
                SpinEventModel.user_id == user_id
            )
        )
        return int(result or 0)

    def append(
        self,
        user_id: str,
        kind: LedgerEventKind,
        points: int,
        ledger_day: date,
        ref_id: Optional[str] = None,
    ) -> SpinEventModel:
        return self.create(
            user_id=user_id,
            kind=kind.value,
            points=points,
            ledger_day=ledger_day,
            ref_id=ref_id,
        )

    def has_spun_on(self, user_id: str, day: date) -> bool:
        """Daily gate: only genuine spins count, never debits or bonuses."""
        return self.exists(
            {"user_id": user_id, "kind": LedgerEventKind.SPIN.value, "ledger_day": day}
        )

    def get_user_ledger(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> PointsLedgerResponse:
        """Paged ledger, newest first"""
        total_count = self.count({"user_id": user_id})

        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(desc(self.model_class.id))
            .limit(limit)
            .offset(offset)
            .all()
        )

        return PointsLedgerResponse(
            balance=self.get_user_balance(user_id),
            entries=[self._to_ledger_entry(instance) for instance in model_instances],
            total_count=total_count,
            has_next=offset + limit < total_count,
        )
