"""
Catalog module exceptions.
"""

from shared.exceptions import ExternalServiceError, NotFoundError, ValidationError


class AdNotFoundError(NotFoundError):
    def __init__(self, ad_id: str):
        super().__init__(
            f"Ad not found: {ad_id}",
            code="AD_NOT_FOUND",
            details={"ad_id": ad_id},
        )


class ShopItemNotFoundError(NotFoundError):
    def __init__(self, item_id: str):
        super().__init__(
            f"Shop item not found: {item_id}",
            code="SHOP_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class InvalidAdWindowError(ValidationError):
    """Raised when an ad's end date lies before its start date."""

    def __init__(self):
        super().__init__("Ad end date must not be before its start date", code="INVALID_AD_WINDOW")


class EmptyCartError(ValidationError):
    def __init__(self):
        super().__init__("Your cart is empty", code="EMPTY_CART")


class OrderFailedError(ExternalServiceError):
    """
    Raised when checkout fails.

    ``order_id`` is set when the order row was written before the failure;
    that row is left in place.
    """

    def __init__(self, message: str, order_id: str | None = None):
        details = {"order_id": order_id} if order_id else {}
        super().__init__(
            f"Failed to place order: {message}",
            service="supabase",
            code="ORDER_FAILED",
            details=details,
        )
        self.order_id = order_id


class UploadTooLargeError(ValidationError):
    def __init__(self, size: int, limit: int):
        super().__init__(
            f"File size must be less than {limit // (1024 * 1024)}MB",
            code="UPLOAD_TOO_LARGE",
            details={"size": size, "limit": limit},
        )


class StorageError(ExternalServiceError):
    def __init__(self, bucket: str, action: str, message: str):
        super().__init__(
            f"Failed to {action} in bucket {bucket}: {message}",
            service="storage",
            code="STORAGE_ERROR",
            details={"bucket": bucket},
        )
