from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from rewardapi.containers import Container
from rewardapi.core.auth_middleware import get_current_user_id
from rewardapi.schemas.store import PurchaseRequest, PurchaseResponse, StoreCatalogResponse
from rewardapi.services.store_service import StoreService

router = APIRouter(prefix="/store", tags=["store"])


@router.get("/items", response_model=StoreCatalogResponse)
@inject
def list_items(
    store_service: StoreService = Depends(Provide[Container.services.store_service]),
) -> StoreCatalogResponse:
    return store_service.get_catalog()


@router.post("/purchases", response_model=PurchaseResponse)
@inject
def purchase_item(
    request: PurchaseRequest,
    user_id: str = Depends(get_current_user_id),
    store_service: StoreService = Depends(Provide[Container.services.store_service]),
) -> PurchaseResponse:
    return store_service.purchase(user_id, request.item)
