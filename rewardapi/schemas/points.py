from typing import List, Optional

from pydantic import BaseModel, Field


class PointsBalanceResponse(BaseModel):
    """Current balance, always computed from the ledger"""

    balance: int = Field(..., description="Sum of all ledger deltas")

    class Config:
        from_attributes = True


class PointsLedgerEntry(BaseModel):
    id: int = Field(..., description="Ledger row id")
    kind: str = Field(..., description="spin | referral_bonus | withdrawal | purchase")
    transaction_type: str = Field(..., description="CREDIT or DEBIT")
    delta_points: int = Field(..., description="Signed point change")
    ref_id: Optional[str] = Field(None, description="Idempotency key")
    ledger_day: str = Field(..., description="Local calendar date of the event")
    created_at: str = Field(..., description="Creation time")

    class Config:
        from_attributes = True


class PointsLedgerResponse(BaseModel):
    balance: int
    entries: List[PointsLedgerEntry]
    total_count: int
    has_next: bool
