"""Application service: Mark Payment Failed use case.

Called when the customer abandons or fails the gateway checkout.  Stock
and cart are untouched.  Repeated reports are harmless: an order that is
already PAYMENT_FAILED or ORDER_CONFIRMED is returned unchanged.
"""

from __future__ import annotations

from storefront.application.dto import StatusChangeDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

_UNCHANGED = (OrderStatus.PAYMENT_FAILED, OrderStatus.ORDER_CONFIRMED)


class MarkPaymentFailedHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, order_id: int) -> StatusChangeDTO:
        with self._uow:
            order = self._uow.orders.get_for_user(order_id, user_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

            previous = order.status
            if previous not in _UNCHANGED:
                order.mark_payment_failed()
                self._uow.orders.save(order)
                self._uow.commit()

        return StatusChangeDTO(
            order_id=order_id,
            previous_status=previous.value,
            status=order.status.value,
        )
