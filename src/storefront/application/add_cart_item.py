"""Application service: Add Cart Item use case."""

from __future__ import annotations

from storefront.application.cart_access import get_or_create_cart, new_id
from storefront.application.dto import CartDTO
from storefront.application.mapping import cart_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork


class AddCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, product_id: str, quantity: int = 1) -> CartDTO:
        """Add a product to the caller's cart, merging with an existing row."""
        Quantity(quantity)

        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None or not product.is_active:
                raise EntityNotFoundError(f"Product not found: '{product_id}'")
            if product.stock <= 0:
                raise ValidationError(f"{product.name} is out of stock")

            cart = get_or_create_cart(self._uow, user_id)
            cart.add(new_id(), product.id, quantity)
            self._uow.carts.save(cart)
            dto = cart_to_dto(cart, self._uow.products)
            self._uow.commit()
            return dto
