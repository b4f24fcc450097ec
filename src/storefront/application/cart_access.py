"""Lazy cart creation shared by the cart use cases."""

from __future__ import annotations

from uuid import uuid4

from storefront.domain.model.cart import Cart
from storefront.domain.repository.unit_of_work import UnitOfWork


def new_id() -> str:
    return uuid4().hex


def get_or_create_cart(uow: UnitOfWork, user_id: str) -> Cart:
    """Return the user's cart, creating (and saving) it on first access.

    Must be called inside an open UnitOfWork; the caller commits.
    """
    cart = uow.carts.get_by_user_id(user_id)
    if cart is None:
        cart = Cart(id=f"cart_{new_id()}", user_id=user_id)
        uow.carts.save(cart)
    return cart
