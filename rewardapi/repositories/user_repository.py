from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from rewardapi.models.user import User as UserModel
from rewardapi.schemas.user import PlatformIdentity, User as UserSchema
from rewardapi.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def lock_user(self, user_id: str) -> Optional[UserModel]:
        """Load the user row with SELECT ... FOR UPDATE.

        Serializes ledger check-then-write sequences for one user across
        processes on PostgreSQL. SQLite ignores the clause and relies on its
        single-writer lock.
        """
        return self.db.scalar(
            select(UserModel).where(UserModel.id == user_id).with_for_update()
        )

    def create_user(
        self, identity: PlatformIdentity, referrer_id: Optional[str]
    ) -> UserModel:
        return self.create(
            id=identity.id,
            first_name=identity.first_name,
            last_name=identity.last_name,
            username=identity.username,
            referrer_id=referrer_id,
        )

    def refresh_profile(self, user: UserModel, identity: PlatformIdentity) -> UserModel:
        """Copy names/handle from the bot identity. id and referrer never change."""
        changed = False
        for field in ("first_name", "last_name", "username"):
            value = getattr(identity, field)
            if getattr(user, field) != value:
                setattr(user, field, value)
                changed = True
        if changed:
            self.db.flush()
        return user
