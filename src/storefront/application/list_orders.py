"""Application service: List Orders use case (query)."""

from __future__ import annotations

from storefront.application.dto import OrderSummaryDTO
from storefront.application.mapping import order_to_summary
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str | None = None, status: str | None = None) -> list[OrderSummaryDTO]:
        """A user's orders, or (admin, no *user_id*) every order filtered by *status*."""
        status_filter = None
        if status:
            try:
                status_filter = OrderStatus(status.strip().upper())
            except ValueError:
                raise ValidationError(f"Unknown order status '{status}'") from None

        with self._uow:
            if user_id is None:
                orders = self._uow.orders.list_all(status_filter)
            else:
                orders = [
                    o for o in self._uow.orders.list_for_user(user_id)
                    if status_filter is None or o.status == status_filter
                ]
        return [order_to_summary(o) for o in orders]
