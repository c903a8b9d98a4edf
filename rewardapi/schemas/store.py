from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class StoreItem(BaseModel):
    item: str
    cost_points: int


class StoreCatalogResponse(BaseModel):
    items: List[StoreItem]
    total_count: int


class PurchaseRequest(BaseModel):
    item: str = Field(..., min_length=1, max_length=128)


class PurchaseResponse(BaseModel):
    success: bool = True
    purchase_id: int
    item: str
    cost_points: int
    balance_after: int
    purchased_at: datetime
