"""Domain -> DTO mapping shared by the handlers."""

from __future__ import annotations

from storefront.application.dto import (
    CartDTO,
    CartLineDTO,
    OrderDTO,
    OrderItemDTO,
    OrderSummaryDTO,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order
from storefront.domain.repository.product_repository import ProductRepository

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def mask_reference(ref: str | None) -> str | None:
    if not ref:
        return None
    return f"{ref[:8]}..."


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price.amount,
                discount_percent=item.discount_percent or 0,
                final_price=item.final_price.amount,
                unit_price_display=str(item.unit_price),
                final_price_display=str(item.final_price),
            )
            for item in order.items
        ],
        total_amount=order.total_amount.amount,
        total_display=str(order.total_amount),
        currency=order.total_amount.currency,
        shipping_address=str(order.shipping_address),
        gateway_order_ref=order.gateway_order_ref,
        payment_ref_masked=mask_reference(order.gateway_payment_ref),
        paid_at=order.paid_at.strftime(_TIMESTAMP_FORMAT) if order.paid_at else None,
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
    )


def order_to_summary(order: Order) -> OrderSummaryDTO:
    return OrderSummaryDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        total_display=str(order.total_amount),
        item_count=len(order.items),
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
    )


def cart_to_dto(cart: Cart, products: ProductRepository) -> CartDTO:
    """Join cart rows with current product data; rows of vanished products are hidden."""
    lines: list[CartLineDTO] = []
    for item in cart.items:
        product = products.get_by_id(item.product_id)
        if product is None:
            continue
        lines.append(
            CartLineDTO(
                item_id=item.id,
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                unit_price=product.unit_price.amount,
                unit_price_display=str(product.unit_price),
                in_stock=product.is_available,
            )
        )
    return CartDTO(cart_id=cart.id, items=lines)
