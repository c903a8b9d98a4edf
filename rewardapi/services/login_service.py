"""
Telegram login handshake.

1. The web client calls ``start_login`` and gets a fresh token plus a bot
   deep link carrying it.
2. The user opens the link; the bot calls ``fulfill_login`` with the
   platform identity, which registers the user and flips the token from
   pending to authenticated.
3. The web client polls ``poll_login``. The first poll that sees the token
   authenticated consumes it and receives the session. Any later poll sees
   ``invalid``.

Both state transitions are conditional writes, so a token authenticates at
most once and is consumed at most once no matter how requests interleave.
"""

import logging
import secrets
from typing import Optional

from rewardapi.config import Settings
from rewardapi.core.exceptions import ValidationError
from rewardapi.core.security import create_access_token
from rewardapi.database.connection import Database
from rewardapi.models.login_token import LoginTokenStatus
from rewardapi.repositories.login_token_repository import LoginTokenRepository
from rewardapi.schemas.auth import (
    FulfillResult,
    LoginPollResponse,
    LoginPollStatus,
    LoginStartResponse,
)
from rewardapi.schemas.user import PlatformIdentity, UserSnapshot
from rewardapi.services.referral_service import ReferralService

logger = logging.getLogger(__name__)

TOKEN_BYTES = 16
# Telegram drops /start parameters longer than this
MAX_START_PAYLOAD = 64
# "<32 hex chars>_<code>" must fit in MAX_START_PAYLOAD
MAX_REFERRAL_CODE_LENGTH = MAX_START_PAYLOAD - TOKEN_BYTES * 2 - 1


class LoginService:
    def __init__(
        self,
        database: Database,
        settings: Settings,
        referral_service: ReferralService,
    ):
        self.database = database
        self.settings = settings
        self.referral_service = referral_service

    def start_login(self, referral_code: Optional[str] = None) -> LoginStartResponse:
        if referral_code and len(referral_code) > MAX_REFERRAL_CODE_LENGTH:
            raise ValidationError(
                "Referral code is too long.",
                details={"max_length": MAX_REFERRAL_CODE_LENGTH},
            )

        token = secrets.token_hex(TOKEN_BYTES)

        with self.database.session() as db:
            LoginTokenRepository(db).save_pending(token)

        payload = f"{token}_{referral_code}" if referral_code else token
        return LoginStartResponse(
            token=token,
            bot_url=f"{self.settings.bot_link}?start={payload}",
            poll_interval_seconds=self.settings.LOGIN_POLL_INTERVAL_SECONDS,
            poll_timeout_seconds=self.settings.LOGIN_POLL_TIMEOUT_SECONDS,
        )

    def poll_login(self, token: str) -> LoginPollResponse:
        with self.database.session() as db:
            tokens = LoginTokenRepository(db)
            record = tokens.get(token)

            if record is None:
                return LoginPollResponse(status=LoginPollStatus.INVALID)
            if record.status == LoginTokenStatus.PENDING.value:
                return LoginPollResponse(status=LoginPollStatus.PENDING)

            user = UserSnapshot(
                id=record.user_id,
                first_name=record.user_first_name,
                username=record.user_username,
            )
            if not tokens.consume_authenticated(token):
                # another poll consumed it between our read and the delete
                return LoginPollResponse(status=LoginPollStatus.INVALID)

        logger.info(f"Login token consumed, session issued for user {user.id}")
        return LoginPollResponse(
            status=LoginPollStatus.AUTHENTICATED,
            user=user,
            access_token=create_access_token(user.id, self.settings),
            token_type="bearer",
        )

    def fulfill_login(
        self,
        token: str,
        identity: PlatformIdentity,
        referral_code: Optional[str] = None,
    ) -> FulfillResult:
        """Bind ``token`` to the bot user, registering them on first contact."""
        with self.database.session() as db:
            tokens = LoginTokenRepository(db)
            record = tokens.get(token)

            if record is None:
                return FulfillResult.INVALID_TOKEN
            if record.status != LoginTokenStatus.PENDING.value:
                return FulfillResult.ALREADY_USED

            user, _ = self.referral_service.resolve_or_create_user(
                db, identity, referral_code
            )
            snapshot = UserSnapshot(
                id=user.id, first_name=user.first_name, username=user.username
            )

            if not tokens.mark_authenticated(token, snapshot):
                # lost the race: undo the registration together with the token update
                db.rollback()
                logger.info(f"Login token already fulfilled concurrently for {identity.id}")
                return FulfillResult.ALREADY_USED

        logger.info(f"Login token authenticated for user {snapshot.id}")
        return FulfillResult.OK
