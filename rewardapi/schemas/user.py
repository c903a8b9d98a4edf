from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PlatformIdentity(BaseModel):
    """Identity as delivered by the bot gateway"""

    id: str = Field(..., min_length=1, max_length=64)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None


class User(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    referrer_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSnapshot(BaseModel):
    """Identity attached to an authenticated login token"""

    id: str
    first_name: Optional[str] = None
    username: Optional[str] = None


class UserProfileWithPoints(BaseModel):
    user: User
    points_balance: int
