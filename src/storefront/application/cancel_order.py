"""Application service: Cancel Order use case (customer side).

Customers may cancel only orders that were never paid for
(PAYMENT_PENDING or PAYMENT_FAILED).  Stock was never decremented for
those, so nothing is restored and the cart is left alone.  Cancelling a
confirmed order is an admin action (see UpdateOrderStatusHandler).
"""

from __future__ import annotations

import logging

from storefront.application.dto import StatusChangeDTO
from storefront.domain.exceptions import EntityNotFoundError, IllegalTransitionError
from storefront.domain.model.order import USER_CANCELLABLE_STATUSES, OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, order_id: int) -> StatusChangeDTO:
        with self._uow:
            order = self._uow.orders.get_for_user(order_id, user_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

            if order.status not in USER_CANCELLABLE_STATUSES:
                raise IllegalTransitionError(order.status, OrderStatus.CANCELLED)

            previous = order.status
            order.cancel()
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("Order #%s cancelled by user %s", order_id, user_id)
        return StatusChangeDTO(
            order_id=order_id,
            previous_status=previous.value,
            status=order.status.value,
        )
