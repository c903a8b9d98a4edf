"""
Referral attribution and user registration.

A user is created the first time the bot sees them. If they arrived through
someone else's referral code, the referrer is credited once with
``REFERRAL_BONUS`` points and a referral edge is recorded. Both writes happen
inside a savepoint: a failure there is logged and rolled back on its own,
and the registration itself still goes through.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rewardapi.config import Settings
from rewardapi.database.connection import Database
from rewardapi.models.points import LedgerEventKind
from rewardapi.models.user import User as UserModel
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.repositories.referral_repository import ReferralRepository
from rewardapi.repositories.user_repository import UserRepository
from rewardapi.schemas.referral import ReferralSummaryResponse
from rewardapi.schemas.user import PlatformIdentity
from rewardapi.utils.timezone_utils import get_local_today

logger = logging.getLogger(__name__)


def referral_ref_id(referred_id: str) -> str:
    # one bonus per referred user, enforced by the ledger's unique ref_id
    return f"referral:{referred_id}"


class ReferralService:
    def __init__(self, database: Database, settings: Settings):
        self.database = database
        self.settings = settings

    def resolve_or_create_user(
        self, db: Session, identity: PlatformIdentity, referral_code: Optional[str]
    ) -> Tuple[UserModel, bool]:
        """Find the user for ``identity`` or register them.

        Runs inside the caller's transaction. Returns ``(user, created)``.
        Existing users get their profile fields refreshed and are never
        attributed to a referrer after the fact.
        """
        users = UserRepository(db)

        existing = users.get_model(identity.id)
        if existing is not None:
            return users.refresh_profile(existing, identity), False

        referrer_id = self._resolve_referrer(users, identity.id, referral_code)

        try:
            with db.begin_nested():
                user = users.create_user(identity, referrer_id)
        except IntegrityError:
            # a concurrent registration for the same id got there first
            existing = users.get_model(identity.id)
            if existing is None:
                raise
            logger.info(f"User {identity.id} was registered concurrently, reusing row")
            return users.refresh_profile(existing, identity), False

        if referrer_id is not None:
            self._credit_referrer(db, referrer_id, user.id)

        logger.info(
            f"Registered user {user.id}"
            + (f" referred by {referrer_id}" if referrer_id else "")
        )
        return user, True

    def register(
        self, identity: PlatformIdentity, referral_code: Optional[str] = None
    ) -> Tuple[UserModel, bool]:
        """Standalone registration, used when the bot is started without a login token."""
        with self.database.session() as db:
            return self.resolve_or_create_user(db, identity, referral_code)

    def get_summary(self, user_id: str) -> ReferralSummaryResponse:
        with self.database.session() as db:
            referred_count = ReferralRepository(db).count_referred(user_id)

        return ReferralSummaryResponse(
            referral_code=user_id,
            referral_link=f"{self.settings.bot_link}?start=ref_{user_id}",
            referred_count=referred_count,
            bonus_per_referral=self.settings.REFERRAL_BONUS,
        )

    def _resolve_referrer(
        self, users: UserRepository, new_user_id: str, referral_code: Optional[str]
    ) -> Optional[str]:
        if not referral_code:
            return None
        if referral_code == new_user_id:
            logger.info(f"Ignoring self-referral for {new_user_id}")
            return None
        if users.get_model(referral_code) is None:
            logger.info(f"Ignoring unknown referral code {referral_code!r} for {new_user_id}")
            return None
        return referral_code

    def _credit_referrer(self, db: Session, referrer_id: str, referred_id: str) -> None:
        today = get_local_today(self.settings.TIMEZONE)
        try:
            with db.begin_nested():
                PointsRepository(db).append(
                    referrer_id,
                    LedgerEventKind.REFERRAL_BONUS,
                    self.settings.REFERRAL_BONUS,
                    today,
                    ref_id=referral_ref_id(referred_id),
                )
                ReferralRepository(db).create_edge(referrer_id, referred_id)
        except SQLAlchemyError as e:
            logger.warning(
                f"Referral bookkeeping failed for {referrer_id} -> {referred_id}, "
                f"registration kept: {str(e)}"
            )
            return

        logger.info(
            f"Credited referrer {referrer_id} with {self.settings.REFERRAL_BONUS} points "
            f"for {referred_id}"
        )
