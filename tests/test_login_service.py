from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from rewardapi.core.exceptions import ValidationError
from rewardapi.core.security import decode_access_token
from rewardapi.models import LoginToken, User as UserModel
from rewardapi.repositories.login_token_repository import LoginTokenRepository
from rewardapi.schemas.auth import FulfillResult, LoginPollStatus
from rewardapi.schemas.user import PlatformIdentity
from rewardapi.services.login_service import MAX_REFERRAL_CODE_LENGTH, MAX_START_PAYLOAD


@pytest.fixture
def identity():
    return PlatformIdentity(id="1001", first_name="Alice", last_name="Doe", username="alice")


class TestStartLogin:
    def test_issues_fresh_hex_token(self, login_service):
        first = login_service.start_login()
        second = login_service.start_login()

        assert len(first.token) == 32
        int(first.token, 16)
        assert first.token != second.token

    def test_bot_url_carries_token_and_referral(self, login_service):
        plain = login_service.start_login()
        referred = login_service.start_login(referral_code="42")

        assert plain.bot_url == f"https://t.me/reward_test_bot?start={plain.token}"
        assert referred.bot_url == f"https://t.me/reward_test_bot?start={referred.token}_42"

    def test_referral_code_fits_telegram_start_limit(self, login_service):
        code = "7" * MAX_REFERRAL_CODE_LENGTH

        response = login_service.start_login(referral_code=code)

        payload = response.bot_url.split("?start=", 1)[1]
        assert payload == f"{response.token}_{code}"
        assert len(payload) == MAX_START_PAYLOAD

    def test_overlong_referral_code_is_rejected(self, login_service, database):
        with pytest.raises(ValidationError) as exc_info:
            login_service.start_login(referral_code="7" * (MAX_REFERRAL_CODE_LENGTH + 1))

        assert exc_info.value.status_code == 422
        with database.session() as db:
            assert db.query(LoginToken).count() == 0

    def test_poll_policy_comes_from_settings(self, login_service):
        response = login_service.start_login()

        assert response.poll_interval_seconds == 2
        assert response.poll_timeout_seconds == 120

    def test_new_token_polls_pending(self, login_service):
        response = login_service.start_login()

        assert login_service.poll_login(response.token).status == LoginPollStatus.PENDING


class TestFulfillAndPoll:
    def test_full_handshake(self, login_service, identity, settings):
        token = login_service.start_login().token

        assert login_service.fulfill_login(token, identity) == FulfillResult.OK

        result = login_service.poll_login(token)
        assert result.status == LoginPollStatus.AUTHENTICATED
        assert result.user.id == "1001"
        assert result.user.first_name == "Alice"
        assert result.user.username == "alice"
        assert result.token_type == "bearer"
        assert decode_access_token(result.access_token, settings) == "1001"

    def test_authenticated_poll_succeeds_only_once(self, login_service, identity):
        token = login_service.start_login().token
        login_service.fulfill_login(token, identity)

        assert login_service.poll_login(token).status == LoginPollStatus.AUTHENTICATED
        second = login_service.poll_login(token)
        assert second.status == LoginPollStatus.INVALID
        assert second.access_token is None

    def test_concurrent_polls_single_winner(self, login_service, identity):
        token = login_service.start_login().token
        login_service.fulfill_login(token, identity)

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: login_service.poll_login(token), range(4)))

        statuses = [r.status for r in results]
        assert statuses.count(LoginPollStatus.AUTHENTICATED) == 1
        assert statuses.count(LoginPollStatus.INVALID) == 3

    def test_unknown_token_is_invalid(self, login_service, identity):
        assert login_service.poll_login("deadbeef").status == LoginPollStatus.INVALID
        assert login_service.fulfill_login("deadbeef", identity) == FulfillResult.INVALID_TOKEN

    def test_fulfill_twice_reports_already_used(self, login_service, identity):
        token = login_service.start_login().token

        assert login_service.fulfill_login(token, identity) == FulfillResult.OK
        other = PlatformIdentity(id="2002", first_name="Mallory")
        assert login_service.fulfill_login(token, other) == FulfillResult.ALREADY_USED

    def test_fulfill_registers_user_once(self, login_service, identity, database):
        login_service.fulfill_login(login_service.start_login().token, identity)
        renamed = PlatformIdentity(id="1001", first_name="Alicia", username="alicia")
        login_service.fulfill_login(login_service.start_login().token, renamed)

        with database.session() as db:
            users = db.query(UserModel).all()
            assert len(users) == 1
            assert users[0].first_name == "Alicia"
            assert users[0].username == "alicia"

    def test_lost_race_rolls_back_new_user(self, login_service, identity, database):
        token = login_service.start_login().token

        with patch.object(LoginTokenRepository, "mark_authenticated", return_value=False):
            result = login_service.fulfill_login(token, identity)

        assert result == FulfillResult.ALREADY_USED
        with database.session() as db:
            assert db.get(UserModel, "1001") is None
            assert db.get(LoginToken, token).status == "pending"

    def test_consumed_token_row_is_deleted(self, login_service, identity, database):
        token = login_service.start_login().token
        login_service.fulfill_login(token, identity)
        login_service.poll_login(token)

        with database.session() as db:
            assert db.get(LoginToken, token) is None
