"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its items.  Every status change
goes through ``Order.transition_to`` which consults the single transition
table below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from storefront.domain.exceptions import IllegalTransitionError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    ORDER_CREATED = "ORDER_CREATED"
    PAYMENT_PENDING = "PAYMENT_PENDING"
    PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.ORDER_CREATED: frozenset({OrderStatus.PAYMENT_PENDING}),
    OrderStatus.PAYMENT_PENDING: frozenset({
        OrderStatus.ORDER_CONFIRMED,
        OrderStatus.PAYMENT_FAILED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.PAYMENT_SUCCESS: frozenset({OrderStatus.ORDER_CONFIRMED}),
    OrderStatus.PAYMENT_FAILED: frozenset({
        OrderStatus.PAYMENT_PENDING,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.ORDER_CONFIRMED: frozenset({
        OrderStatus.SHIPPED,
        OrderStatus.CANCELLED,
    }),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Statuses in which the order's quantities have been taken out of stock.
STOCK_COMMITTED_STATUSES = frozenset({
    OrderStatus.ORDER_CONFIRMED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
})

# Users may only cancel orders that were never paid for.
USER_CANCELLABLE_STATUSES = frozenset({
    OrderStatus.PAYMENT_PENDING,
    OrderStatus.PAYMENT_FAILED,
})

MAX_ORDER_ITEMS = 100


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class OrderItem:
    """Price snapshot of a product at order-creation time.

    Immutable: historical orders must display what was paid even after
    the product is repriced or discontinued.
    """

    product_id: str
    product_name: str
    quantity: int
    unit_price: Money  # discounted unit price, locked at creation
    discount_percent: int | None
    final_price: Money  # unit_price * quantity
    id: str = field(default_factory=lambda: uuid4().hex)

    @staticmethod
    def snapshot(product: Product, quantity: int) -> OrderItem:
        """Copy the product's current price and discount onto a new item."""
        qty = Quantity(quantity).value
        unit_price = product.unit_price
        return OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=qty,
            unit_price=unit_price,
            discount_percent=product.discount_percent or None,
            final_price=unit_price * qty,
        )


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders: it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    items: list[OrderItem]
    total_amount: Money
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.ORDER_CREATED
    gateway_order_ref: str | None = None
    gateway_payment_ref: str | None = None
    gateway_signature: str | None = None
    paid_at: datetime | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
    ) -> Order:
        """Create a new order awaiting payment.

        The total is fixed here from the item snapshots and never changes
        afterwards.
        """
        if not user_id:
            raise ValidationError("Order must belong to a user")
        if not items:
            raise ValidationError("At least one item must be selected")
        if len(items) > MAX_ORDER_ITEMS:
            raise ValidationError(f"Maximum {MAX_ORDER_ITEMS} items per order")

        currency = items[0].final_price.currency
        total = Money.zero(currency)
        for item in items:
            total = total + item.final_price
        if total.amount <= 0:
            raise ValidationError("Invalid order amount")

        order = Order(
            id=None,
            user_id=user_id,
            items=list(items),
            total_amount=total,
            shipping_address=shipping_address,
        )
        order.transition_to(OrderStatus.PAYMENT_PENDING)
        return order

    # --- State transitions ----------------------------------------------------

    def transition_to(self, requested: OrderStatus) -> None:
        """Move to *requested* if the transition table allows it."""
        if not can_transition(self.status, requested):
            raise IllegalTransitionError(self.status, requested)
        self.status = requested
        self.updated_at = _now()

    def attach_gateway_order(self, gateway_order_ref: str) -> None:
        """Record the payment intent created at the gateway (write-once)."""
        if self.status != OrderStatus.PAYMENT_PENDING:
            raise IllegalTransitionError(self.status, OrderStatus.PAYMENT_PENDING)
        if self.gateway_order_ref is not None:
            raise ValidationError(
                f"Order #{self.id} already has a gateway order reference"
            )
        self.gateway_order_ref = gateway_order_ref
        self.updated_at = _now()

    def confirm_payment(self, payment_ref: str, signature: str) -> None:
        """Transition PAYMENT_PENDING -> ORDER_CONFIRMED.

        Stock must be decremented in the same transaction *before* calling
        this (coordinated by the application handler via the stock service).
        """
        self.transition_to(OrderStatus.ORDER_CONFIRMED)
        self.gateway_payment_ref = payment_ref
        self.gateway_signature = signature
        self.paid_at = self.updated_at

    def mark_payment_failed(self, payment_ref: str | None = None) -> None:
        """Transition PAYMENT_PENDING -> PAYMENT_FAILED.

        *payment_ref* is recorded when the gateway captured a payment that
        can no longer be fulfilled, so it can be reconciled later.
        """
        self.transition_to(OrderStatus.PAYMENT_FAILED)
        if payment_ref is not None:
            self.gateway_payment_ref = payment_ref

    def retry_payment(self) -> None:
        """Transition PAYMENT_FAILED -> PAYMENT_PENDING.

        The existing gateway order reference, if any, is kept and reused.
        """
        self.transition_to(OrderStatus.PAYMENT_PENDING)

    def ship(self) -> None:
        self.transition_to(OrderStatus.SHIPPED)

    def deliver(self) -> None:
        self.transition_to(OrderStatus.DELIVERED)

    def cancel(self) -> None:
        """Transition to CANCELLED.

        If ``stock_is_committed`` was true, stock restoration must happen
        in the same transaction (see StockService.restore_for_order).
        """
        self.transition_to(OrderStatus.CANCELLED)

    # --- Computed properties --------------------------------------------------

    @property
    def stock_is_committed(self) -> bool:
        return self.status in STOCK_COMMITTED_STATUSES

    @property
    def items_total(self) -> Money:
        result = Money.zero(self.total_amount.currency)
        for item in self.items:
            result = result + item.final_price
        return result

    @property
    def product_ids(self) -> set[str]:
        return {item.product_id for item in self.items}

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
