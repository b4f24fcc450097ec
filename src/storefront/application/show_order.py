"""Application service: Show Order use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO
from storefront.application.mapping import order_to_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, user_id: str | None = None) -> OrderDTO:
        """Return one order.

        With *user_id* the lookup is scoped to that user's orders; without
        it (admin view) any order is visible.
        """
        with self._uow:
            if user_id is None:
                order = self._uow.orders.get_by_id(order_id)
            else:
                order = self._uow.orders.get_for_user(order_id, user_id)
        if order is None:
            raise EntityNotFoundError("Order not found")
        return order_to_dto(order)
