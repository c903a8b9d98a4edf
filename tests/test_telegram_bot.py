import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from rewardapi.bot.telegram_bot import (
    ALREADY_USED_TEXT,
    INVALID_TEXT,
    RETRY_TEXT,
    SUCCESS_TEXT,
    WELCOME_TEXT,
    StartCommand,
    StartPayload,
    parse_start_payload,
)
from rewardapi.core.exceptions import StoreUnavailableError
from rewardapi.models import User as UserModel
from rewardapi.schemas.auth import LoginPollStatus
from rewardapi.schemas.user import PlatformIdentity


@pytest.fixture
def start_command(settings, login_service, referral_service):
    return StartCommand(settings, login_service, referral_service)


@pytest.fixture
def identity():
    return PlatformIdentity(id="1201", first_name="Dave", username="dave")


class TestParseStartPayload:
    @pytest.mark.parametrize(
        "payload, expected",
        [
            (None, StartPayload()),
            ("", StartPayload()),
            ("ab12cd", StartPayload(token="ab12cd")),
            ("ab12cd_777", StartPayload(token="ab12cd", referral_code="777")),
            ("ref_777", StartPayload(referral_code="777")),
            ("ref_", StartPayload()),
        ],
    )
    def test_payload_forms(self, payload, expected):
        assert parse_start_payload(payload) == expected


class TestStartCommand:
    def test_no_payload_registers_and_welcomes(self, start_command, identity, database):
        reply = asyncio.run(start_command.handle(None, identity))

        assert reply.text == WELCOME_TEXT
        assert reply.button_url is None
        with database.session() as db:
            assert db.get(UserModel, "1201") is not None

    def test_referral_only_payload(self, start_command, identity, make_user, balance_of):
        make_user("1200")

        reply = asyncio.run(start_command.handle("ref_1200", identity))

        assert reply.text == WELCOME_TEXT
        assert balance_of("1200") == 500

    def test_login_payload_completes_handshake(
        self, start_command, identity, login_service, settings
    ):
        token = login_service.start_login().token

        reply = asyncio.run(start_command.handle(token, identity))

        assert reply.text == SUCCESS_TEXT
        assert reply.button_url == settings.WEB_APP_URL
        assert reply.reply_markup() is not None
        assert login_service.poll_login(token).status == LoginPollStatus.AUTHENTICATED

    def test_login_payload_with_referral(
        self, start_command, identity, login_service, make_user, balance_of
    ):
        make_user("1200")
        token = login_service.start_login(referral_code="1200").token

        asyncio.run(start_command.handle(f"{token}_1200", identity))

        assert balance_of("1200") == 500

    def test_reused_link(self, start_command, identity, login_service):
        token = login_service.start_login().token
        asyncio.run(start_command.handle(token, identity))

        reply = asyncio.run(start_command.handle(token, identity))

        assert reply.text == ALREADY_USED_TEXT

    def test_unknown_token(self, start_command, identity):
        reply = asyncio.run(start_command.handle("0123abcd", identity))

        assert reply.text == INVALID_TEXT

    def test_store_failure_asks_to_retry(self, settings, referral_service, identity):
        login_service = Mock()
        login_service.fulfill_login.side_effect = StoreUnavailableError()
        command = StartCommand(settings, login_service, referral_service)

        reply = asyncio.run(command.handle("0123abcd", identity))

        assert reply.text == RETRY_TEXT

    def test_handler_replies_to_message(self, start_command):
        update = Mock()
        update.effective_user.id = 1300
        update.effective_user.first_name = "Erin"
        update.effective_user.last_name = None
        update.effective_user.username = "erin"
        update.message.reply_text = AsyncMock()
        context = Mock()
        context.args = []

        asyncio.run(start_command(update, context))

        update.message.reply_text.assert_awaited_once_with(WELCOME_TEXT, reply_markup=None)
