from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator


class WithdrawalCreateRequest(BaseModel):
    destination_address: str = Field(..., max_length=128, description="Payout address")
    points: int = Field(..., description="Points to withdraw")

    @field_validator("destination_address")
    @classmethod
    def strip_address(cls, v: str) -> str:
        return v.strip()


class WithdrawRequestItem(BaseModel):
    id: int
    points: int
    destination_address: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class WithdrawalResponse(BaseModel):
    success: bool = True
    message: str
    request: WithdrawRequestItem
    balance_after: int


class WithdrawHistoryResponse(BaseModel):
    history: List[WithdrawRequestItem]
