from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from rewardapi.models.base import BaseModel


class User(BaseModel):
    """Telegram-linked user. The id doubles as the user's referral code."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # Bound once at registration, never rewritten
    referrer_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=True, index=True
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, referrer={self.referrer_id})>"
