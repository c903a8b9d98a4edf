from dependency_injector import containers, providers

from rewardapi.config import get_settings
from rewardapi.database.connection import init_database
from rewardapi.database.locks import UserLockRegistry
from rewardapi.services.login_service import LoginService
from rewardapi.services.point_service import PointService
from rewardapi.services.referral_service import ReferralService
from rewardapi.services.store_service import StoreService
from rewardapi.services.user_service import UserService
from rewardapi.services.wheel_service import WheelService
from rewardapi.services.withdrawal_service import WithdrawalService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    settings = providers.Singleton(get_settings)


class StoreModule(containers.DeclarativeContainer):
    """Persistent store handle and per-user write locks."""

    config = providers.DependenciesContainer()

    database = providers.Resource(init_database, settings=config.settings)
    user_locks = providers.Singleton(
        UserLockRegistry,
        timeout_seconds=config.settings.provided.USER_LOCK_TIMEOUT_SECONDS,
    )


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies."""

    config = providers.DependenciesContainer()
    store = providers.DependenciesContainer()

    referral_service = providers.Factory(
        ReferralService, database=store.database, settings=config.settings
    )
    login_service = providers.Factory(
        LoginService,
        database=store.database,
        settings=config.settings,
        referral_service=referral_service,
    )
    wheel_service = providers.Factory(
        WheelService,
        database=store.database,
        settings=config.settings,
        user_locks=store.user_locks,
    )
    withdrawal_service = providers.Factory(
        WithdrawalService,
        database=store.database,
        settings=config.settings,
        user_locks=store.user_locks,
    )
    store_service = providers.Factory(
        StoreService,
        database=store.database,
        settings=config.settings,
        user_locks=store.user_locks,
    )
    point_service = providers.Factory(PointService, database=store.database)
    user_service = providers.Factory(UserService, database=store.database)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "rewardapi.core.auth_middleware",
            "rewardapi.routers.auth_router",
            "rewardapi.routers.user_router",
            "rewardapi.routers.wheel_router",
            "rewardapi.routers.point_router",
            "rewardapi.routers.withdrawal_router",
            "rewardapi.routers.referral_router",
            "rewardapi.routers.store_router",
            "rewardapi.routers.health_router",
        ],
    )

    config = providers.Container(ConfigModule)
    store = providers.Container(StoreModule, config=config)
    services = providers.Container(ServiceModule, config=config, store=store)
