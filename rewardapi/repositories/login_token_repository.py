from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from rewardapi.models.login_token import LoginToken as LoginTokenModel, LoginTokenStatus
from rewardapi.schemas.user import UserSnapshot


class LoginTokenRepository:
    """Persist login tokens and perform their single-use state transitions.

    Both transitions are conditional statements whose affected-row count tells
    the caller whether it won: the read used to decide is never trusted on its
    own.
    """

    def __init__(self, db: Session):
        self.db = db

    def save_pending(self, token: str) -> None:
        self.db.add(
            LoginTokenModel(token=token, status=LoginTokenStatus.PENDING.value)
        )
        self.db.flush()

    def get(self, token: str) -> Optional[LoginTokenModel]:
        return self.db.scalar(
            select(LoginTokenModel).where(LoginTokenModel.token == token)
        )

    def mark_authenticated(self, token: str, user: UserSnapshot) -> bool:
        """pending -> authenticated. False if the token was not pending anymore."""
        result = self.db.execute(
            update(LoginTokenModel)
            .where(
                LoginTokenModel.token == token,
                LoginTokenModel.status == LoginTokenStatus.PENDING.value,
            )
            .values(
                status=LoginTokenStatus.AUTHENTICATED.value,
                user_id=user.id,
                user_first_name=user.first_name,
                user_username=user.username,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def consume_authenticated(self, token: str) -> bool:
        """Atomic test-and-delete. Exactly one concurrent caller gets True."""
        result = self.db.execute(
            delete(LoginTokenModel)
            .where(
                LoginTokenModel.token == token,
                LoginTokenModel.status == LoginTokenStatus.AUTHENTICATED.value,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
