"""Application configuration."""

import os
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WheelSlice(BaseModel):
    """One slice of the reward wheel. ``points=None`` marks the jackpot slot."""

    label: str
    points: Optional[int] = None

    @property
    def is_jackpot(self) -> bool:
        return self.points is None


def _default_slices() -> List[WheelSlice]:
    return [
        WheelSlice(label="10", points=10),
        WheelSlice(label="20", points=20),
        WheelSlice(label="50", points=50),
        WheelSlice(label="100", points=100),
        WheelSlice(label="200", points=200),
        WheelSlice(label="500", points=500),
        WheelSlice(label="1000", points=1000),
        WheelSlice(label="JACKPOT", points=None),
    ]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )

    # Application
    APP_NAME: str = "Reward Wheel API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # Database
    DATABASE_URL: str = "sqlite:///./rewardapi.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT_SECONDS: int = 10
    DB_CONNECT_TIMEOUT_SECONDS: int = 5
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    AUTO_MIGRATE: bool = True
    USER_LOCK_TIMEOUT_SECONDS: float = 5.0

    # Session (JWT)
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Telegram
    BOT_TOKEN: str = ""
    BOT_USERNAME: str = ""
    WEB_APP_URL: str = "http://localhost:8000/"
    LOGIN_POLL_INTERVAL_SECONDS: int = 2
    LOGIN_POLL_TIMEOUT_SECONDS: int = 120

    # Business rules
    TIMEZONE: str = "UTC"
    MIN_WITHDRAWAL: int = 20000
    REFERRAL_BONUS: int = 500
    JACKPOT_RANGE: Tuple[int, int] = (2000, 5000)
    WHEEL_SLICES: List[WheelSlice] = Field(default_factory=_default_slices)
    STORE_ITEMS: Dict[str, int] = Field(
        default_factory=lambda: {"gift-card-10": 10000, "gift-card-25": 25000}
    )

    @field_validator("WHEEL_SLICES")
    @classmethod
    def slices_must_not_be_empty(cls, v: List[WheelSlice]) -> List[WheelSlice]:
        if not v:
            raise ValueError("WHEEL_SLICES must contain at least one slice")
        return v

    @field_validator("MIN_WITHDRAWAL", "REFERRAL_BONUS")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @model_validator(mode="after")
    def check_jackpot_range(self) -> "Settings":
        low, high = self.JACKPOT_RANGE
        if low < 0 or low > high:
            raise ValueError("JACKPOT_RANGE must be [min, max] with 0 <= min <= max")
        return self

    @property
    def bot_link(self) -> str:
        return f"https://t.me/{self.BOT_USERNAME}"


class DevelopmentSettings(Settings):
    DEBUG: bool = True


class StagingSettings(Settings):
    DEBUG: bool = False


class ProductionSettings(Settings):
    DEBUG: bool = False
    AUTO_MIGRATE: bool = False


ENVIRONMENTS: dict[str, type[Settings]] = {
    "development": DevelopmentSettings,
    "staging": StagingSettings,
    "production": ProductionSettings,
}


@lru_cache
def get_settings() -> Settings:
    """Return settings instance based on ENVIRONMENT variable."""

    env = os.getenv("ENVIRONMENT", "development").lower()
    settings_cls = ENVIRONMENTS.get(env, DevelopmentSettings)
    return settings_cls()
