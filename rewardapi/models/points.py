"""
Points ledger model.

Every point movement (wheel spin, referral bonus, withdrawal debit, store
purchase) is one append-only row here. A user's balance is the SUM of their
``points`` column; no running total is stored anywhere.
"""

import enum
from datetime import date
from typing import Optional

from sqlalchemy import BigInteger, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from rewardapi.models.base import AppendOnlyModel


class LedgerEventKind(str, enum.Enum):
    SPIN = "spin"
    REFERRAL_BONUS = "referral_bonus"
    WITHDRAWAL = "withdrawal"
    PURCHASE = "purchase"


class SpinEvent(AppendOnlyModel):
    __tablename__ = "spin_events"
    __table_args__ = (
        UniqueConstraint("ref_id", name="uq_spin_events_ref_id"),
        Index("ix_spin_events_user_kind_day", "user_id", "kind", "ledger_day"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    kind: Mapped[str] = mapped_column(String(32), nullable=False)

    # Signed delta: positive credits, negative debits
    points: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Idempotency key, e.g. "spin:<user>:2024-01-01", "withdrawal:42"
    ref_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    # Server-local calendar date the event belongs to; drives the daily spin gate
    ledger_day: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self):
        return f"<SpinEvent(id={self.id}, user={self.user_id}, kind={self.kind}, points={self.points})>"
