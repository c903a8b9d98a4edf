from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy import text

from rewardapi.containers import Container
from rewardapi.database.connection import Database
from rewardapi.schemas.health import HealthCheckResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthCheckResponse)
@inject
def health_check(
    database: Database = Depends(Provide[Container.store.database]),
) -> HealthCheckResponse:
    """Liveness plus a round trip to the store. 503 when the store is down."""
    with database.session() as db:
        db.execute(text("SELECT 1"))
    return HealthCheckResponse()
