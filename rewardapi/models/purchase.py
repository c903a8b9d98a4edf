from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rewardapi.models.base import AppendOnlyModel


class Purchase(AppendOnlyModel):
    __tablename__ = "purchases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False, index=True
    )
    item: Mapped[str] = mapped_column(String(128), nullable=False)
    points: Mapped[int] = mapped_column(BigInteger, nullable=False)
