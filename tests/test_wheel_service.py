from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from unittest.mock import patch

import pytest

from rewardapi.core.exceptions import AlreadySpunTodayError, NotFoundError
from rewardapi.models import LedgerEventKind, SpinEvent
from rewardapi.services.wheel_service import draw_jackpot_points, draw_slice_index
from rewardapi.utils.timezone_utils import get_local_today


@pytest.fixture
def spinner(make_user):
    return make_user("3001")


class TestDraws:
    def test_jackpot_draws_stay_in_range(self):
        draws = [draw_jackpot_points(2000, 5000) for _ in range(10000)]

        assert all(2000 <= d <= 5000 for d in draws)

    def test_jackpot_range_is_inclusive(self):
        draws = {draw_jackpot_points(0, 1) for _ in range(10000)}

        assert draws == {0, 1}
        assert draw_jackpot_points(7, 7) == 7

    def test_slice_index_covers_table(self):
        indexes = {draw_slice_index(8) for _ in range(5000)}

        assert indexes == set(range(8))


class TestSpin:
    def test_spin_credits_the_drawn_slice(self, wheel_service, spinner, balance_of, settings):
        with patch("rewardapi.services.wheel_service.draw_slice_index", return_value=3):
            result = wheel_service.spin(spinner)

        expected = settings.WHEEL_SLICES[3]
        assert result.slice_index == 3
        assert result.prize == expected.label
        assert result.points_awarded == expected.points
        assert result.is_jackpot is False
        assert balance_of(spinner) == expected.points

    def test_jackpot_slice_awards_range_points(self, wheel_service, spinner, balance_of):
        with patch("rewardapi.services.wheel_service.draw_slice_index", return_value=7):
            result = wheel_service.spin(spinner)

        assert result.is_jackpot is True
        assert result.prize == "JACKPOT"
        assert 2000 <= result.points_awarded <= 5000
        assert balance_of(spinner) == result.points_awarded

    def test_response_index_matches_wheel_table(self, wheel_service, spinner):
        result = wheel_service.spin(spinner)
        wheel = wheel_service.get_wheel()

        assert wheel.slices[result.slice_index].label == result.prize

    def test_second_spin_same_day_rejected(self, wheel_service, spinner, balance_of):
        first = wheel_service.spin(spinner)

        with pytest.raises(AlreadySpunTodayError) as exc_info:
            wheel_service.spin(spinner)

        assert exc_info.value.status_code == 409
        assert exc_info.value.error_code == "SPIN_001"
        assert balance_of(spinner) == first.points_awarded

    def test_yesterdays_spin_does_not_block(self, wheel_service, spinner, credit, settings):
        yesterday = get_local_today(settings.TIMEZONE) - timedelta(days=1)
        credit(spinner, 100, kind=LedgerEventKind.SPIN, day=yesterday)

        result = wheel_service.spin(spinner)

        assert result.points_awarded > 0

    def test_withdrawal_debit_does_not_block_spin(
        self, wheel_service, withdrawal_service, spinner, credit
    ):
        credit(spinner, 25000)
        withdrawal_service.request_withdrawal(spinner, "So1anaAddr", 20000)

        result = wheel_service.spin(spinner)

        assert result.points_awarded > 0

    def test_concurrent_spins_single_winner(self, wheel_service, spinner, database):
        def attempt(_):
            try:
                wheel_service.spin(spinner)
                return True
            except AlreadySpunTodayError:
                return False

        with ThreadPoolExecutor(max_workers=5) as pool:
            outcomes = list(pool.map(attempt, range(5)))

        assert outcomes.count(True) == 1
        with database.session() as db:
            assert db.query(SpinEvent).filter(SpinEvent.kind == "spin").count() == 1

    def test_unknown_user_rejected(self, wheel_service):
        with pytest.raises(NotFoundError):
            wheel_service.spin("ghost")


class TestGetWheel:
    def test_wheel_lists_configured_slices(self, wheel_service, settings):
        wheel = wheel_service.get_wheel()

        assert [s.index for s in wheel.slices] == list(range(len(settings.WHEEL_SLICES)))
        assert [s.label for s in wheel.slices] == [s.label for s in settings.WHEEL_SLICES]
        assert wheel.slices[-1].points is None
        assert (wheel.jackpot_min, wheel.jackpot_max) == (2000, 5000)
