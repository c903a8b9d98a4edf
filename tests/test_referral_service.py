from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from rewardapi.models import ReferralEdge, SpinEvent, User as UserModel
from rewardapi.repositories.referral_repository import ReferralRepository
from rewardapi.schemas.user import PlatformIdentity


def _identity(user_id: str, first_name: str = "New") -> PlatformIdentity:
    return PlatformIdentity(id=user_id, first_name=first_name)


@pytest.fixture
def referrer(make_user):
    return make_user("500", first_name="Referrer")


class TestResolveOrCreateUser:
    def test_valid_code_credits_referrer_once(
        self, referral_service, referrer, database, balance_of
    ):
        user, created = referral_service.register(_identity("600"), referral_code=referrer)

        assert created is True
        assert user.referrer_id == "500"
        assert balance_of("500") == 500
        with database.session() as db:
            edges = db.query(ReferralEdge).all()
            assert [(e.referrer_id, e.referred_id) for e in edges] == [("500", "600")]
            bonus = db.query(SpinEvent).filter(SpinEvent.user_id == "500").one()
            assert bonus.kind == "referral_bonus"
            assert bonus.ref_id == "referral:600"

    def test_re_registration_adds_nothing(
        self, referral_service, referrer, make_user, database, balance_of
    ):
        make_user("700")
        referral_service.register(_identity("600"), referral_code=referrer)

        user, created = referral_service.register(_identity("600"), referral_code="700")

        assert created is False
        assert user.referrer_id == "500"
        assert balance_of("500") == 500
        assert balance_of("700") == 0
        with database.session() as db:
            assert db.query(ReferralEdge).count() == 1

    def test_self_referral_ignored(self, referral_service, database, balance_of):
        user, created = referral_service.register(_identity("800"), referral_code="800")

        assert created is True
        assert user.referrer_id is None
        assert balance_of("800") == 0
        with database.session() as db:
            assert db.query(ReferralEdge).count() == 0

    def test_unknown_code_fails_open(self, referral_service, database):
        user, created = referral_service.register(_identity("900"), referral_code="12345")

        assert created is True
        assert user.referrer_id is None
        with database.session() as db:
            assert db.get(UserModel, "900") is not None
            assert db.query(ReferralEdge).count() == 0

    def test_existing_user_profile_refreshed(self, referral_service, make_user, database):
        make_user("901", first_name="Old")

        user, created = referral_service.register(
            PlatformIdentity(id="901", first_name="New", username="newname")
        )

        assert created is False
        with database.session() as db:
            stored = db.get(UserModel, "901")
            assert stored.first_name == "New"
            assert stored.username == "newname"

    def test_bookkeeping_failure_keeps_registration(
        self, referral_service, referrer, database, balance_of
    ):
        boom = IntegrityError("INSERT INTO referrals", {}, Exception("constraint"))
        with patch.object(ReferralRepository, "create_edge", side_effect=boom):
            user, created = referral_service.register(_identity("610"), referral_code=referrer)

        assert created is True
        # bonus and edge are all-or-nothing
        assert balance_of("500") == 0
        with database.session() as db:
            assert db.get(UserModel, "610") is not None
            assert db.query(ReferralEdge).count() == 0


class TestReferralSummary:
    def test_summary_counts_referred_users(self, referral_service, referrer):
        referral_service.register(_identity("601"), referral_code=referrer)
        referral_service.register(_identity("602"), referral_code=referrer)

        summary = referral_service.get_summary("500")

        assert summary.referral_code == "500"
        assert summary.referral_link == "https://t.me/reward_test_bot?start=ref_500"
        assert summary.referred_count == 2
        assert summary.bonus_per_referral == 500
