"""Application service: Remove Cart Item use case.

Only items of the caller's own cart can be removed.
"""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class RemoveCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, cart_item_id: str) -> None:
        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None:
                raise EntityNotFoundError("Cart not found")
            cart.remove_item(cart_item_id)
            self._uow.carts.save(cart)
            self._uow.commit()
