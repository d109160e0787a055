"""
Catalog services: ads, shop and checkout.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from shared.exceptions import SportikoError

from .exceptions import (
    AdNotFoundError,
    EmptyCartError,
    InvalidAdWindowError,
    OrderFailedError,
    ShopItemNotFoundError,
)
from .models import (
    Ad,
    AdCreate,
    AdType,
    AdUpdate,
    Cart,
    CheckoutLine,
    CheckoutResult,
    OrderStatus,
    ShopItem,
    ShopItemCreate,
    ShopItemUpdate,
)
from .repository import AdRepository, OrderRepository, ShopItemRepository

logger = logging.getLogger(__name__)


def _json_payload(model) -> dict:
    return model.model_dump(mode="json", exclude_unset=True)


# ----------------------------------------------------------------------------
# Ads
# ----------------------------------------------------------------------------


class AdService:
    def __init__(self, repository: AdRepository):
        self._repository = repository

    async def list_ads(self) -> list[Ad]:
        return self._repository.list_ads()

    async def create_ad(self, request: AdCreate) -> Ad:
        if request.end_date < request.start_date:
            raise InvalidAdWindowError()
        ad = self._repository.create_ad(request.model_dump(mode="json"))
        logger.info("Created ad %s", ad.id)
        return ad

    async def update_ad(self, ad_id: str, request: AdUpdate) -> Ad:
        if request.start_date and request.end_date and request.end_date < request.start_date:
            raise InvalidAdWindowError()
        ad = self._repository.update_ad(ad_id, _json_payload(request))
        if ad is None:
            raise AdNotFoundError(ad_id)
        return ad

    async def delete_ad(self, ad_id: str) -> None:
        self._repository.delete_ad(ad_id)
        logger.info("Deleted ad %s", ad_id)

    async def toggle_active(self, ad_id: str) -> Ad:
        ad = self._repository.get_ad(ad_id)
        if ad is None:
            raise AdNotFoundError(ad_id)
        updated = self._repository.update_ad(ad_id, {"active": not ad.active})
        if updated is None:
            raise AdNotFoundError(ad_id)
        logger.info("Ad %s %s", ad_id, "activated" if updated.active else "deactivated")
        return updated

    async def active_ad(self, ad_type: AdType, now: Optional[datetime] = None) -> Optional[Ad]:
        """
        The ad to show for an audience, if any.

        Banner lookups never fail their caller: a backend error is logged and
        treated as "no ad".
        """
        now = now or datetime.now(timezone.utc)
        try:
            return self._repository.active_ad(ad_type.value, now)
        except SportikoError as e:
            logger.error("Error loading ad: %s", e.message)
            return None


# ----------------------------------------------------------------------------
# Shop
# ----------------------------------------------------------------------------


def _matches(item: ShopItem, search: str) -> bool:
    needle = search.lower()
    return needle in item.name.lower() or needle in (item.description or "").lower()


class ShopService:
    def __init__(self, items: ShopItemRepository, orders: OrderRepository):
        self._items = items
        self._orders = orders

    async def list_items(
        self,
        active_only: bool = False,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[ShopItem]:
        """Shop items newest first, filtered by name/description and category."""
        items = self._items.list_items(active_only=active_only)
        if search:
            items = [i for i in items if _matches(i, search)]
        if category:
            items = [i for i in items if i.category == category]
        return items

    async def categories(self, active_only: bool = True) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for item in self._items.list_items(active_only=active_only):
            if item.category:
                seen.setdefault(item.category, None)
        return list(seen)

    async def get_item(self, item_id: str) -> ShopItem:
        item = self._items.get_item(item_id)
        if item is None:
            raise ShopItemNotFoundError(item_id)
        return item

    async def create_item(self, request: ShopItemCreate) -> ShopItem:
        item = self._items.create_item(request.model_dump(mode="json"))
        logger.info("Created shop item %s", item.id)
        return item

    async def update_item(self, item_id: str, request: ShopItemUpdate) -> ShopItem:
        item = self._items.update_item(item_id, _json_payload(request))
        if item is None:
            raise ShopItemNotFoundError(item_id)
        return item

    async def delete_item(self, item_id: str) -> None:
        self._items.delete_item(item_id)
        logger.info("Deleted shop item %s", item_id)

    async def build_cart(self, lines: list[CheckoutLine]) -> Cart:
        """
        Rebuild a cart from client-submitted lines using current item data.

        Names and prices come from the shop, not from the request.

        Raises:
            ShopItemNotFoundError: A line refers to an unknown or inactive item
        """
        cart = Cart()
        for line in lines:
            item = await self.get_item(line.item_id)
            if not item.active:
                raise ShopItemNotFoundError(line.item_id)
            cart.add(item, line.quantity)
        return cart

    async def checkout(self, user_id: str, cart: Cart) -> CheckoutResult:
        """
        Place an order for the cart's contents.

        Writes the order row, then its line items. If the second write fails
        the order row stays behind and its id is reported on the error.

        Raises:
            EmptyCartError: The cart has no lines
            OrderFailedError: Either write failed
        """
        if cart.empty:
            raise EmptyCartError()

        try:
            order = self._orders.create_order(
                {
                    "user_id": user_id,
                    "total_amount": cart.total,
                    "status": OrderStatus.PENDING.value,
                }
            )
        except SportikoError as e:
            logger.error("Error placing order for %s: %s", user_id, e.message)
            raise OrderFailedError(e.message) from e

        try:
            self._orders.add_order_items(
                [
                    {
                        "order_id": order.id,
                        "shop_item_id": line.item_id,
                        "quantity": line.quantity,
                        "price": line.price,
                    }
                    for line in cart.lines
                ]
            )
        except SportikoError as e:
            logger.error("Order %s written without its items: %s", order.id, e.message)
            raise OrderFailedError(e.message, order_id=order.id) from e

        logger.info("Order %s placed by %s (%d items)", order.id, user_id, cart.count)
        result = CheckoutResult(order=order, item_count=cart.count)
        cart.clear()
        return result
