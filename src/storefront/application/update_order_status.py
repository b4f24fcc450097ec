"""Application service: Update Order Status use case (admin).

Admins move confirmed orders through shipping and delivery, or cancel
them.  Cancelling an order whose stock was already decremented puts the
stock back in the same transaction.  Prices and quantities are never
touched.
"""

from __future__ import annotations

import logging

from storefront.application.dto import StatusChangeDTO
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_service import StockService

logger = logging.getLogger(__name__)

ADMIN_SETTABLE_STATUSES = (
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, new_status: str) -> StatusChangeDTO:
        target = self._parse_status(new_status)

        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

            previous = order.status
            restore = target == OrderStatus.CANCELLED and order.stock_is_committed

            order.transition_to(target)
            if restore:
                StockService(self._uow.products).restore_for_order(order)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order #%s moved from %s to %s%s",
            order_id, previous.value, target.value,
            " (stock restored)" if restore else "",
        )
        return StatusChangeDTO(
            order_id=order_id,
            previous_status=previous.value,
            status=target.value,
            stock_restored=restore,
        )

    @staticmethod
    def _parse_status(raw: str) -> OrderStatus:
        allowed = ", ".join(s.value for s in ADMIN_SETTABLE_STATUSES)
        try:
            status = OrderStatus((raw or "").strip().upper())
        except ValueError:
            raise ValidationError(f"Invalid status. Allowed: {allowed}") from None
        if status not in ADMIN_SETTABLE_STATUSES:
            raise ValidationError(f"Invalid status. Allowed: {allowed}")
        return status
