"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Amounts stay integers
in minor units; formatted strings are provided for display.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CartItemSpec:
    """Input: a (product, quantity) pair supplied from outside, e.g. a guest cart."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class CartLineDTO:
    item_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: int
    unit_price_display: str
    in_stock: bool


@dataclass(frozen=True)
class CartDTO:
    cart_id: str
    items: list[CartLineDTO]


@dataclass(frozen=True)
class MergeResultDTO:
    cart: CartDTO
    skipped: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single order item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: int
    discount_percent: int
    final_price: int
    unit_price_display: str  # formatted, e.g. "INR 90.00"
    final_price_display: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    user_id: str
    status: str
    items: list[OrderItemDTO]
    total_amount: int
    total_display: str
    currency: str
    shipping_address: str
    gateway_order_ref: str | None
    payment_ref_masked: str | None
    paid_at: str | None
    created_at: str


@dataclass(frozen=True)
class OrderSummaryDTO:
    id: int
    user_id: str
    status: str
    total_display: str
    item_count: int
    created_at: str


@dataclass(frozen=True)
class PaymentIntentDTO:
    order_id: int
    gateway_order_ref: str
    amount: int
    currency: str


@dataclass(frozen=True)
class CreateOrderResult:
    order: OrderDTO
    payment: PaymentIntentDTO | None
    warning: str | None = None


@dataclass(frozen=True)
class PaymentConfirmationDTO:
    order_id: int
    status: str
    already_confirmed: bool
    message: str


@dataclass(frozen=True)
class StatusChangeDTO:
    order_id: int
    previous_status: str
    status: str
    stock_restored: bool = False
