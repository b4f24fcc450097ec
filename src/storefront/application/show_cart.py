"""Application service: Show Cart use case (creates the cart on first access)."""

from __future__ import annotations

from storefront.application.cart_access import get_or_create_cart
from storefront.application.dto import CartDTO
from storefront.application.mapping import cart_to_dto
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> CartDTO:
        with self._uow:
            cart = get_or_create_cart(self._uow, user_id)
            dto = cart_to_dto(cart, self._uow.products)
            self._uow.commit()
            return dto
