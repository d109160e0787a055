"""
Catalog API endpoints.

``ads_router`` and ``shop_router`` are mounted in the superadmin tree;
``trainer_router`` serves the trainer-facing shop and ad banner.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from api.dependencies import (
    RequestContext,
    get_ad_service,
    get_request_context,
    get_shop_service,
    get_storage_service,
)

from .models import (
    Ad,
    AdCreate,
    AdType,
    AdUpdate,
    CheckoutRequest,
    CheckoutResult,
    ShopItem,
    ShopItemCreate,
    ShopItemUpdate,
    StorageObject,
    StoredFile,
)
from .service import AdService, ShopService
from .storage import ADS_IMAGES_BUCKET, SHOP_IMAGES_BUCKET, StorageService

ads_router = APIRouter()
shop_router = APIRouter()
trainer_router = APIRouter()


async def _upload(storage: StorageService, bucket: str, file: UploadFile) -> StoredFile:
    content = await file.read()
    return storage.upload(bucket, file.filename or "upload", content, file.content_type)


# =============================================================================
# Ads (superadmin)
# =============================================================================


@ads_router.get("", response_model=list[Ad])
async def list_ads(service: AdService = Depends(get_ad_service)) -> list[Ad]:
    return await service.list_ads()


@ads_router.post("", response_model=Ad, status_code=201)
async def create_ad(request: AdCreate, service: AdService = Depends(get_ad_service)) -> Ad:
    return await service.create_ad(request)


@ads_router.get("/images", response_model=list[StorageObject])
async def list_ad_images(storage: StorageService = Depends(get_storage_service)) -> list[StorageObject]:
    return storage.list(ADS_IMAGES_BUCKET)


@ads_router.post("/images", response_model=StoredFile, status_code=201)
async def upload_ad_image(
    file: UploadFile = File(...),
    storage: StorageService = Depends(get_storage_service),
) -> StoredFile:
    """Upload an ad image (5MB max) and return its public URL."""
    return await _upload(storage, ADS_IMAGES_BUCKET, file)


@ads_router.patch("/{ad_id}", response_model=Ad)
async def update_ad(ad_id: str, request: AdUpdate, service: AdService = Depends(get_ad_service)) -> Ad:
    return await service.update_ad(ad_id, request)


@ads_router.post("/{ad_id}/toggle-active", response_model=Ad)
async def toggle_ad(ad_id: str, service: AdService = Depends(get_ad_service)) -> Ad:
    return await service.toggle_active(ad_id)


@ads_router.delete("/{ad_id}", status_code=204)
async def delete_ad(ad_id: str, service: AdService = Depends(get_ad_service)) -> None:
    await service.delete_ad(ad_id)


# =============================================================================
# Shop items (superadmin)
# =============================================================================


@shop_router.get("", response_model=list[ShopItem])
async def list_shop_items(
    search: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    service: ShopService = Depends(get_shop_service),
) -> list[ShopItem]:
    """All items, including inactive ones."""
    return await service.list_items(active_only=False, search=search, category=category)


@shop_router.post("", response_model=ShopItem, status_code=201)
async def create_shop_item(
    request: ShopItemCreate,
    service: ShopService = Depends(get_shop_service),
) -> ShopItem:
    return await service.create_item(request)


@shop_router.get("/images", response_model=list[StorageObject])
async def list_shop_images(storage: StorageService = Depends(get_storage_service)) -> list[StorageObject]:
    """Previously uploaded images, for reuse."""
    return storage.list(SHOP_IMAGES_BUCKET)


@shop_router.post("/images", response_model=StoredFile, status_code=201)
async def upload_shop_image(
    file: UploadFile = File(...),
    storage: StorageService = Depends(get_storage_service),
) -> StoredFile:
    return await _upload(storage, SHOP_IMAGES_BUCKET, file)


@shop_router.patch("/{item_id}", response_model=ShopItem)
async def update_shop_item(
    item_id: str,
    request: ShopItemUpdate,
    service: ShopService = Depends(get_shop_service),
) -> ShopItem:
    return await service.update_item(item_id, request)


@shop_router.delete("/{item_id}", status_code=204)
async def delete_shop_item(item_id: str, service: ShopService = Depends(get_shop_service)) -> None:
    await service.delete_item(item_id)


# =============================================================================
# Trainer side
# =============================================================================


@trainer_router.get("/shop", response_model=list[ShopItem])
async def browse_shop(
    search: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    service: ShopService = Depends(get_shop_service),
) -> list[ShopItem]:
    """Active items only."""
    return await service.list_items(active_only=True, search=search, category=category)


@trainer_router.get("/shop/categories", response_model=list[str])
async def shop_categories(service: ShopService = Depends(get_shop_service)) -> list[str]:
    return await service.categories()


@trainer_router.post("/shop/checkout", response_model=CheckoutResult, status_code=201)
async def checkout(
    request: CheckoutRequest,
    ctx: RequestContext = Depends(get_request_context),
    service: ShopService = Depends(get_shop_service),
) -> CheckoutResult:
    """
    Place an order.

    Prices are taken from the shop, not the request. If writing the line
    items fails, the order row is kept and its id is returned in the error.
    """
    cart = await service.build_cart(request.lines)
    return await service.checkout(ctx.principal.id, cart)


@trainer_router.get("/ads/active", response_model=Optional[Ad])
async def active_ad(
    ad_type: AdType = Query(default=AdType.TRAINER, alias="type"),
    service: AdService = Depends(get_ad_service),
) -> Optional[Ad]:
    """The banner ad to show now, or null."""
    return await service.active_ad(ad_type)
