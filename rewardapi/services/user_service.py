from rewardapi.core.exceptions import NotFoundError
from rewardapi.database.connection import Database
from rewardapi.repositories.points_repository import PointsRepository
from rewardapi.repositories.user_repository import UserRepository
from rewardapi.schemas.user import UserProfileWithPoints


class UserService:
    def __init__(self, database: Database):
        self.database = database

    def get_profile(self, user_id: str) -> UserProfileWithPoints:
        """Profile of the logged-in user together with the current balance."""
        with self.database.session() as db:
            user = UserRepository(db).get_by_id(user_id)
            if user is None:
                raise NotFoundError("User not found")
            balance = PointsRepository(db).get_user_balance(user_id)

        return UserProfileWithPoints(user=user, points_balance=balance)
