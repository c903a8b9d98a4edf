import enum
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from rewardapi.models.base import AppendOnlyModel


class LoginTokenStatus(str, enum.Enum):
    PENDING = "pending"
    AUTHENTICATED = "authenticated"


class LoginToken(AppendOnlyModel):
    """One-time token binding an anonymous web client to a bot identity.

    Lifecycle: created pending by the web side, flipped to authenticated once
    by the bot side, deleted by the first successful poll.
    """

    __tablename__ = "login_tokens"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LoginTokenStatus.PENDING.value
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_first_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    user_username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
