"""
Catalog module.

Shared-schema content managed by superadmins and consumed by trainers:
banner ads, shop items, checkout and file storage.
"""

from .models import (
    Ad,
    AdCreate,
    AdType,
    AdUpdate,
    Cart,
    CartLine,
    CheckoutLine,
    CheckoutRequest,
    CheckoutResult,
    Order,
    OrderStatus,
    ShopItem,
    ShopItemCreate,
    ShopItemUpdate,
    StorageObject,
    StoredFile,
)
from .exceptions import (
    AdNotFoundError,
    ShopItemNotFoundError,
    InvalidAdWindowError,
    EmptyCartError,
    OrderFailedError,
    UploadTooLargeError,
    StorageError,
)
from .repository import AdRepository, ShopItemRepository, OrderRepository
from .storage import (
    AVATARS_BUCKET,
    ADS_IMAGES_BUCKET,
    SHOP_IMAGES_BUCKET,
    StorageService,
    trainer_bucket,
    unique_path,
)
from .service import AdService, ShopService

__all__ = [
    "Ad",
    "AdCreate",
    "AdType",
    "AdUpdate",
    "Cart",
    "CartLine",
    "CheckoutLine",
    "CheckoutRequest",
    "CheckoutResult",
    "Order",
    "OrderStatus",
    "ShopItem",
    "ShopItemCreate",
    "ShopItemUpdate",
    "StorageObject",
    "StoredFile",
    "AdNotFoundError",
    "ShopItemNotFoundError",
    "InvalidAdWindowError",
    "EmptyCartError",
    "OrderFailedError",
    "UploadTooLargeError",
    "StorageError",
    "AdRepository",
    "ShopItemRepository",
    "OrderRepository",
    "AVATARS_BUCKET",
    "ADS_IMAGES_BUCKET",
    "SHOP_IMAGES_BUCKET",
    "StorageService",
    "trainer_bucket",
    "unique_path",
    "AdService",
    "ShopService",
]
