"""
Catalog module data models.

Ads, shop items, the shopping cart and orders.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ----------------------------------------------------------------------------
# Ads
# ----------------------------------------------------------------------------


class AdType(str, Enum):
    """Audience an ad is shown to."""

    SUPERADMIN = "superadmin"
    TRAINER = "trainer"


class Ad(BaseModel):
    """A row of the shared ``ads`` table."""

    id: str = Field(..., description="Ad ID")
    title: str = Field(..., description="Headline")
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    type: AdType = Field(AdType.SUPERADMIN, description="Audience")
    active: bool = Field(True, description="Whether the ad may be shown")
    start_date: Optional[datetime] = Field(None, description="Start of the validity window")
    end_date: Optional[datetime] = Field(None, description="End of the validity window")
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class AdCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    type: AdType = AdType.SUPERADMIN
    start_date: datetime
    end_date: datetime
    active: bool = True


class AdUpdate(BaseModel):
    """Partial update; only fields that were set are written."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    type: Optional[AdType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    active: Optional[bool] = None


# ----------------------------------------------------------------------------
# Shop
# ----------------------------------------------------------------------------


class ShopItem(BaseModel):
    """A row of the shared ``shop_items`` table."""

    id: str = Field(..., description="Item ID")
    name: str = Field(..., description="Item name")
    description: Optional[str] = None
    price: float = Field(0.0, ge=0, description="Unit price")
    category: Optional[str] = None
    stock_quantity: Optional[int] = None
    image_url: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class ShopItemCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category: Optional[str] = None
    stock_quantity: int = Field(0, ge=0)
    image_url: Optional[str] = None
    active: bool = True


class ShopItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    active: Optional[bool] = None


# ----------------------------------------------------------------------------
# Cart and orders
# ----------------------------------------------------------------------------


class CartLine(BaseModel):
    item_id: str
    name: str
    price: float
    quantity: int = Field(1, ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class Cart(BaseModel):
    """
    Shopping cart.

    Adding an item already in the cart increments its quantity; setting a
    quantity of zero or less removes the line.
    """

    lines: list[CartLine] = Field(default_factory=list)

    def _find(self, item_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.item_id == item_id), None)

    def add(self, item: ShopItem, quantity: int = 1) -> None:
        line = self._find(item.id)
        if line is None:
            self.lines.append(CartLine(item_id=item.id, name=item.name, price=item.price, quantity=quantity))
        else:
            line.quantity += quantity

    def remove(self, item_id: str) -> None:
        self.lines = [line for line in self.lines if line.item_id != item_id]

    def update_quantity(self, item_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(item_id)
            return
        line = self._find(item_id)
        if line is not None:
            line.quantity = quantity

    def clear(self) -> None:
        self.lines = []

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self.lines)

    @property
    def count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def empty(self) -> bool:
        return not self.lines


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(BaseModel):
    """A row of the shared ``orders`` table."""

    id: str
    user_id: Optional[str] = None
    total_amount: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None

    model_config = {"extra": "ignore"}


class CheckoutLine(BaseModel):
    item_id: str
    quantity: int = Field(1, ge=1)


class CheckoutRequest(BaseModel):
    lines: list[CheckoutLine] = Field(default_factory=list, description="Cart contents")


class CheckoutResult(BaseModel):
    order: Order
    item_count: int


# ----------------------------------------------------------------------------
# Storage
# ----------------------------------------------------------------------------


class StoredFile(BaseModel):
    bucket: str
    path: str
    public_url: str


class StorageObject(BaseModel):
    """An entry returned by a bucket listing."""

    name: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    public_url: Optional[str] = None

    model_config = {"extra": "ignore"}
