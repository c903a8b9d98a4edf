from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from rewardapi.config import Settings
from rewardapi.containers import Container
from rewardapi.core.exceptions import AuthenticationError
from rewardapi.core.security import decode_access_token

# JWT Bearer scheme; missing headers are reported as our own 401 body
security = HTTPBearer(auto_error=False)


@inject
def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(Provide[Container.config.settings]),
) -> str:
    """Resolve the logged-in user id from the session token.

    The id always comes from the signed token, never from the request body.
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("You must be logged in to do this.")
    return decode_access_token(credentials.credentials, settings)
