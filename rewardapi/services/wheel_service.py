import logging
import secrets
from datetime import date

from sqlalchemy.exc import IntegrityError

from rewardapi.config import Settings
from rewardapi.core.exceptions import AlreadySpunTodayError, NotFoundError
from rewardapi.database.connection import Database
from rewardapi.database.locks import UserLockRegistry
from rewardapi.models.points import LedgerEventKind
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.repositories.user_repository import UserRepository
from rewardapi.schemas.wheel import SpinResponse, WheelResponse, WheelSliceResponse
from rewardapi.utils.timezone_utils import get_local_today

logger = logging.getLogger(__name__)


def draw_slice_index(slice_count: int) -> int:
    """Uniform index into the slice table, from the OS CSPRNG."""
    return secrets.randbelow(slice_count)


def draw_jackpot_points(low: int, high: int) -> int:
    """Uniform integer in [low, high], both ends inclusive."""
    return low + secrets.randbelow(high - low + 1)


def spin_ref_id(user_id: str, day: date) -> str:
    return f"spin:{user_id}:{day.isoformat()}"


class WheelService:
    def __init__(
        self,
        database: Database,
        settings: Settings,
        user_locks: UserLockRegistry,
    ):
        self.database = database
        self.settings = settings
        self.user_locks = user_locks

    def get_wheel(self) -> WheelResponse:
        low, high = self.settings.JACKPOT_RANGE
        return WheelResponse(
            slices=[
                WheelSliceResponse(index=index, label=s.label, points=s.points)
                for index, s in enumerate(self.settings.WHEEL_SLICES)
            ],
            jackpot_min=low,
            jackpot_max=high,
        )

    def spin(self, user_id: str) -> SpinResponse:
        """Spin once for today.

        The daily check, the draw and the credit run under the user's lock in
        one transaction. The ledger's unique spin key backs this up across
        processes: a losing duplicate insert is reported as already-spun.
        """
        today = get_local_today(self.settings.TIMEZONE)
        slices = self.settings.WHEEL_SLICES

        with self.user_locks.hold(user_id), self.database.session() as db:
            if UserRepository(db).lock_user(user_id) is None:
                raise NotFoundError("User not found")

            points_repo = PointsRepository(db)
            if points_repo.has_spun_on(user_id, today):
                raise AlreadySpunTodayError(details={"ledger_day": today.isoformat()})

            slice_index = draw_slice_index(len(slices))
            chosen = slices[slice_index]
            if chosen.is_jackpot:
                points_awarded = draw_jackpot_points(*self.settings.JACKPOT_RANGE)
            else:
                points_awarded = chosen.points

            try:
                points_repo.append(
                    user_id,
                    LedgerEventKind.SPIN,
                    points_awarded,
                    today,
                    ref_id=spin_ref_id(user_id, today),
                )
            except IntegrityError:
                raise AlreadySpunTodayError(details={"ledger_day": today.isoformat()})

        logger.info(
            f"User {user_id} spun {chosen.label!r} (slice {slice_index}) "
            f"for {points_awarded} points"
        )
        return SpinResponse(
            prize=chosen.label,
            points_awarded=points_awarded,
            slice_index=slice_index,
            is_jackpot=chosen.is_jackpot,
        )
