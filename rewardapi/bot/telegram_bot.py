"""
Telegram bot gateway.

The bot only understands ``/start <payload>``. The payload comes from the
deep link handed out by ``POST /auth/telegram/start`` or from a referral
link:

    <token>                 complete a web login
    <token>_<referralCode>  complete a web login, registering with a referral
    ref_<referralCode>      register with a referral, no web login
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from rewardapi.config import Settings
from rewardapi.core.exceptions import StoreUnavailableError
from rewardapi.schemas.auth import FulfillResult
from rewardapi.schemas.user import PlatformIdentity
from rewardapi.services.login_service import LoginService
from rewardapi.services.referral_service import ReferralService

logger = logging.getLogger(__name__)

REFERRAL_PREFIX = "ref_"

WELCOME_TEXT = "Welcome! Please start the login process from our website."
INVALID_TEXT = "This login link is invalid or has expired."
ALREADY_USED_TEXT = "This login link has already been used."
SUCCESS_TEXT = (
    "You have successfully logged in!\n\n"
    "Please return to your web browser to continue."
)
RETRY_TEXT = "An error occurred during login. Please try again."
WEBSITE_BUTTON_TEXT = "Go to Website"


@dataclass(frozen=True)
class StartPayload:
    token: Optional[str] = None
    referral_code: Optional[str] = None


@dataclass(frozen=True)
class BotReply:
    text: str
    button_url: Optional[str] = None

    def reply_markup(self) -> Optional[InlineKeyboardMarkup]:
        if not self.button_url:
            return None
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton(WEBSITE_BUTTON_TEXT, url=self.button_url)]]
        )


def parse_start_payload(payload: Optional[str]) -> StartPayload:
    payload = (payload or "").strip()
    if not payload:
        return StartPayload()
    if payload.startswith(REFERRAL_PREFIX):
        return StartPayload(referral_code=payload[len(REFERRAL_PREFIX) :] or None)

    # tokens are hex, so the first underscore separates the referral code
    token, _, referral_code = payload.partition("_")
    return StartPayload(token=token, referral_code=referral_code or None)


def reply_for_result(result: FulfillResult, web_app_url: str) -> BotReply:
    if result == FulfillResult.OK:
        return BotReply(SUCCESS_TEXT, button_url=web_app_url)
    if result == FulfillResult.ALREADY_USED:
        return BotReply(ALREADY_USED_TEXT)
    return BotReply(INVALID_TEXT)


def identity_from_update(update: Update) -> PlatformIdentity:
    tg_user = update.effective_user
    return PlatformIdentity(
        id=str(tg_user.id),
        first_name=tg_user.first_name,
        last_name=tg_user.last_name,
        username=tg_user.username,
    )


class StartCommand:
    """``/start`` handler. Services are synchronous, so they run off the event loop."""

    def __init__(
        self,
        settings: Settings,
        login_service: LoginService,
        referral_service: ReferralService,
    ):
        self.settings = settings
        self.login_service = login_service
        self.referral_service = referral_service

    async def handle(self, payload: Optional[str], identity: PlatformIdentity) -> BotReply:
        start = parse_start_payload(payload)
        try:
            if start.token is None:
                # no web login in progress: register (or refresh) the user only
                await asyncio.to_thread(
                    self.referral_service.register, identity, start.referral_code
                )
                return BotReply(WELCOME_TEXT)

            result = await asyncio.to_thread(
                self.login_service.fulfill_login,
                start.token,
                identity,
                start.referral_code,
            )
        except StoreUnavailableError as e:
            logger.error(f"Bot /start failed for {identity.id}: {str(e)}")
            return BotReply(RETRY_TEXT)

        logger.info(f"Bot /start for {identity.id}: {result.value}")
        return reply_for_result(result, self.settings.WEB_APP_URL)

    async def __call__(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        payload = context.args[0] if context.args else None
        reply = await self.handle(payload, identity_from_update(update))
        await update.message.reply_text(reply.text, reply_markup=reply.reply_markup())


def build_application(
    settings: Settings,
    login_service: LoginService,
    referral_service: ReferralService,
) -> Application:
    app = Application.builder().token(settings.BOT_TOKEN).build()
    app.add_handler(
        CommandHandler("start", StartCommand(settings, login_service, referral_service))
    )
    return app
