"""Application service: Create Order use case.

Turns selected cart items into an order awaiting payment.  This is the
only place that coordinates Cart, Product and Order in one transaction.

Rules:
- Prices and totals always come from the store, never from the caller.
- Stock is checked but NOT deducted (that happens on verified payment).
- The cart is not touched; purchased items leave it on confirmation.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from storefront.application.create_payment_intent import CreatePaymentIntentHandler
from storefront.application.dto import CreateOrderResult, PaymentIntentDTO
from storefront.application.mapping import order_to_dto
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ExternalDependencyError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.order import MAX_ORDER_ITEMS, Order, OrderItem
from storefront.domain.model.value_objects import Quantity, ShippingAddress
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

GATEWAY_WARNING = (
    "Order created but payment gateway initialization failed. "
    "You can retry payment from your orders page."
)


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, gateway: PaymentGateway) -> None:
        self._uow = uow
        self._gateway = gateway

    def handle(
        self,
        user_id: str,
        cart_item_ids: list[str],
        shipping_address: ShippingAddress,
    ) -> CreateOrderResult:
        """Create an order from the caller's selected cart items.

        Steps:
        1. Validate the selection belongs to the caller's cart.
        2. Re-read products inside the transaction and snapshot prices.
        3. Check stock, create the order in PAYMENT_PENDING, commit.
        4. Outside the transaction, create the gateway payment intent.
        """
        selected_ids = self._normalize_ids(cart_item_ids)

        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None:
                raise EntityNotFoundError("Cart not found")

            invalid_ids = [i for i in selected_ids if cart.find_item(i) is None]
            if invalid_ids:
                raise ValidationError(
                    "Some selected items do not belong to your cart: "
                    + ", ".join(invalid_ids)
                )

            selected = [cart.find_item(i) for i in selected_ids]
            for cart_item in selected:
                try:
                    Quantity(cart_item.quantity)
                except ValidationError:
                    raise ValidationError(f"Invalid quantity for item {cart_item.id}") from None

            products = {}
            missing = []
            for cart_item in selected:
                product = self._uow.products.get_by_id(cart_item.product_id)
                if product is None or not product.is_active:
                    missing.append(cart_item.product_id)
                else:
                    products[cart_item.product_id] = product
            if missing:
                raise ValidationError(
                    f"Some products are not available: {', '.join(missing)}"
                )

            items = [
                OrderItem.snapshot(products[c.product_id], c.quantity)
                for c in selected
            ]

            for cart_item in selected:
                product = products[cart_item.product_id]
                if not product.has_stock_for(cart_item.quantity):
                    raise InsufficientStockError(
                        product.name, product.stock, cart_item.quantity
                    )

            order = Order.create(
                user_id=user_id,
                items=items,
                shipping_address=shipping_address,
            )
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order #%s created for user %s, total %s", order.id, user_id, order.total_amount
        )

        payment: PaymentIntentDTO | None = None
        warning: str | None = None
        try:
            payment = CreatePaymentIntentHandler(self._uow, self._gateway).handle(
                user_id, order.id  # type: ignore[arg-type]
            )
        except ExternalDependencyError as exc:
            logger.warning("Payment intent for order #%s failed: %s", order.id, exc)
            warning = GATEWAY_WARNING

        dto = order_to_dto(order)
        if payment is not None:
            dto = replace(dto, gateway_order_ref=payment.gateway_order_ref)
        return CreateOrderResult(order=dto, payment=payment, warning=warning)

    @staticmethod
    def _normalize_ids(cart_item_ids: list[str]) -> list[str]:
        ids = list(dict.fromkeys(i.strip() for i in cart_item_ids if i and i.strip()))
        if not ids:
            raise ValidationError("At least one item must be selected")
        if len(ids) > MAX_ORDER_ITEMS:
            raise ValidationError(f"Maximum {MAX_ORDER_ITEMS} items per order")
        return ids
