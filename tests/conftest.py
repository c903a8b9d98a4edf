from datetime import date
from typing import Optional

import pytest

from rewardapi.config import Settings
from rewardapi.database.connection import Database
from rewardapi.database.locks import UserLockRegistry
from rewardapi.models import Base, LedgerEventKind, User as UserModel
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.services.login_service import LoginService
from rewardapi.services.point_service import PointService
from rewardapi.services.referral_service import ReferralService
from rewardapi.services.store_service import StoreService
from rewardapi.services.user_service import UserService
from rewardapi.services.wheel_service import WheelService
from rewardapi.services.withdrawal_service import WithdrawalService
from rewardapi.utils.timezone_utils import get_local_today


@pytest.fixture
def settings(tmp_path):
    """Isolated settings backed by a throwaway SQLite file"""
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'rewardapi-test.db'}",
        SECRET_KEY="test-secret-key",
        BOT_USERNAME="reward_test_bot",
        WEB_APP_URL="https://rewards.example.com/",
        TIMEZONE="UTC",
        AUTO_MIGRATE=False,
        USER_LOCK_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def database(settings):
    database = Database.from_settings(settings)
    Base.metadata.create_all(database.engine)
    yield database
    database.dispose()


@pytest.fixture
def user_locks(settings):
    return UserLockRegistry(settings.USER_LOCK_TIMEOUT_SECONDS)


@pytest.fixture
def referral_service(database, settings):
    return ReferralService(database, settings)


@pytest.fixture
def login_service(database, settings, referral_service):
    return LoginService(database, settings, referral_service)


@pytest.fixture
def wheel_service(database, settings, user_locks):
    return WheelService(database, settings, user_locks)


@pytest.fixture
def withdrawal_service(database, settings, user_locks):
    return WithdrawalService(database, settings, user_locks)


@pytest.fixture
def store_service(database, settings, user_locks):
    return StoreService(database, settings, user_locks)


@pytest.fixture
def point_service(database):
    return PointService(database)


@pytest.fixture
def user_service(database):
    return UserService(database)


@pytest.fixture
def make_user(database):
    """Insert a user row directly, bypassing the bot"""

    def _make_user(user_id: str, first_name: str = "Test", referrer_id: Optional[str] = None):
        with database.session() as db:
            db.add(UserModel(id=user_id, first_name=first_name, referrer_id=referrer_id))
        return user_id

    return _make_user


@pytest.fixture
def credit(database, settings):
    """Seed a ledger delta for a user. Uses the bonus kind so the spin gate stays open."""
    counter = {"n": 0}

    def _credit(
        user_id: str,
        points: int,
        kind: LedgerEventKind = LedgerEventKind.REFERRAL_BONUS,
        day: Optional[date] = None,
    ):
        counter["n"] += 1
        with database.session() as db:
            PointsRepository(db).append(
                user_id,
                kind,
                points,
                day or get_local_today(settings.TIMEZONE),
                ref_id=f"seed:{user_id}:{counter['n']}",
            )

    return _credit


@pytest.fixture
def balance_of(database):
    def _balance_of(user_id: str) -> int:
        with database.session() as db:
            return PointsRepository(db).get_user_balance(user_id)

    return _balance_of


@pytest.fixture
def container(settings, database):
    """Application container pointed at the test store"""
    from dependency_injector import providers

    from rewardapi.containers import Container

    container = Container()
    container.config.settings.override(providers.Object(settings))
    container.store.database.override(providers.Object(database))
    yield container
    container.unwire()


@pytest.fixture
def client(container):
    from fastapi.testclient import TestClient

    from rewardapi.main import create_app

    return TestClient(create_app(container))


@pytest.fixture
def auth_headers(settings):
    from rewardapi.core.security import create_access_token

    def _auth_headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, settings)}"}

    return _auth_headers
