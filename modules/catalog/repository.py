"""
Catalog repositories: ads, shop items and orders in the shared schema.
"""

from datetime import datetime
from typing import Any, Optional

from shared.repository import BaseRepository

from .models import Ad, Order, ShopItem

ADS_TABLE = "ads"
SHOP_ITEMS_TABLE = "shop_items"
ORDERS_TABLE = "orders"
ORDER_ITEMS_TABLE = "order_items"


class AdRepository(BaseRepository[Ad]):
    def list_ads(self) -> list[Ad]:
        result = self._execute(
            self._db.table(ADS_TABLE).select("*").order("created_at", desc=True),
            "load ads",
            ADS_TABLE,
        )
        return [Ad.model_validate(row) for row in result.data or []]

    def get_ad(self, ad_id: str) -> Optional[Ad]:
        row = self._fetch_one(
            self._db.table(ADS_TABLE).select("*").eq("id", ad_id),
            "load ad",
            ADS_TABLE,
        )
        return Ad.model_validate(row) if row else None

    def active_ad(self, ad_type: str, now: datetime) -> Optional[Ad]:
        """The first active ad of a type whose validity window contains ``now``."""
        stamp = now.isoformat()
        result = self._execute(
            self._db.table(ADS_TABLE)
            .select("*")
            .eq("type", ad_type)
            .eq("active", True)
            .lte("start_date", stamp)
            .gte("end_date", stamp)
            .limit(1),
            "load active ad",
            ADS_TABLE,
        )
        rows = result.data or []
        return Ad.model_validate(rows[0]) if rows else None

    def create_ad(self, data: dict[str, Any]) -> Ad:
        result = self._execute(self._db.table(ADS_TABLE).insert(data), "create ad", ADS_TABLE)
        return Ad.model_validate(result.data[0])

    def update_ad(self, ad_id: str, data: dict[str, Any]) -> Optional[Ad]:
        result = self._execute(
            self._db.table(ADS_TABLE).update(data).eq("id", ad_id),
            "update ad",
            ADS_TABLE,
        )
        if not result.data:
            return None
        return Ad.model_validate(result.data[0])

    def delete_ad(self, ad_id: str) -> None:
        self._execute(self._db.table(ADS_TABLE).delete().eq("id", ad_id), "delete ad", ADS_TABLE)


class ShopItemRepository(BaseRepository[ShopItem]):
    def list_items(self, active_only: bool = False) -> list[ShopItem]:
        query = self._db.table(SHOP_ITEMS_TABLE).select("*")
        if active_only:
            query = query.eq("active", True)
        result = self._execute(
            query.order("created_at", desc=True),
            "load shop items",
            SHOP_ITEMS_TABLE,
        )
        return [ShopItem.model_validate(row) for row in result.data or []]

    def get_item(self, item_id: str) -> Optional[ShopItem]:
        row = self._fetch_one(
            self._db.table(SHOP_ITEMS_TABLE).select("*").eq("id", item_id),
            "load shop item",
            SHOP_ITEMS_TABLE,
        )
        return ShopItem.model_validate(row) if row else None

    def create_item(self, data: dict[str, Any]) -> ShopItem:
        result = self._execute(
            self._db.table(SHOP_ITEMS_TABLE).insert(data),
            "create shop item",
            SHOP_ITEMS_TABLE,
        )
        return ShopItem.model_validate(result.data[0])

    def update_item(self, item_id: str, data: dict[str, Any]) -> Optional[ShopItem]:
        result = self._execute(
            self._db.table(SHOP_ITEMS_TABLE).update(data).eq("id", item_id),
            "update shop item",
            SHOP_ITEMS_TABLE,
        )
        if not result.data:
            return None
        return ShopItem.model_validate(result.data[0])

    def delete_item(self, item_id: str) -> None:
        self._execute(
            self._db.table(SHOP_ITEMS_TABLE).delete().eq("id", item_id),
            "delete shop item",
            SHOP_ITEMS_TABLE,
        )


class OrderRepository(BaseRepository[Order]):
    """
    Orders and their line items.

    The two inserts are separate requests; nothing here makes them atomic.
    """

    def list_orders(self) -> list[Order]:
        result = self._execute(
            self._db.table(ORDERS_TABLE).select("*"),
            "load orders",
            ORDERS_TABLE,
        )
        return [Order.model_validate(row) for row in result.data or []]

    def create_order(self, data: dict[str, Any]) -> Order:
        result = self._execute(
            self._db.table(ORDERS_TABLE).insert(data),
            "create order",
            ORDERS_TABLE,
        )
        return Order.model_validate(result.data[0])

    def add_order_items(self, rows: list[dict[str, Any]]) -> None:
        self._execute(
            self._db.table(ORDER_ITEMS_TABLE).insert(rows),
            "create order items",
            ORDER_ITEMS_TABLE,
        )
