"""Application service: Create Payment Intent use case.

Asks the gateway for a payment order matching an order's committed total.
Also the retry path: a PAYMENT_FAILED order goes back to PAYMENT_PENDING
and reuses its existing gateway reference when it has one.

The gateway is never called while a store transaction is open.
"""

from __future__ import annotations

import logging

from storefront.application.dto import PaymentIntentDTO
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ExternalDependencyError,
    IllegalTransitionError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class CreatePaymentIntentHandler:

    def __init__(self, uow: UnitOfWork, gateway: PaymentGateway) -> None:
        self._uow = uow
        self._gateway = gateway

    def handle(self, user_id: str, order_id: int) -> PaymentIntentDTO:
        with self._uow:
            order = self._load(user_id, order_id)
            if order.status == OrderStatus.PAYMENT_FAILED:
                order.retry_payment()
                self._uow.orders.save(order)
                self._uow.commit()
            elif order.status != OrderStatus.PAYMENT_PENDING:
                raise IllegalTransitionError(order.status, OrderStatus.PAYMENT_PENDING)

            if order.gateway_order_ref is not None:
                return self._to_dto(order)

            amount = order.total_amount

        intent = self._gateway.create_intent(amount, order_id)
        if intent.amount != amount.amount or intent.currency != amount.currency:
            logger.error(
                "Gateway intent %s for order #%s has %s %s, expected %s",
                intent.gateway_order_ref, order_id,
                intent.amount, intent.currency, amount,
            )
            raise ExternalDependencyError("Payment gateway returned a mismatched amount")

        with self._uow:
            order = self._load(user_id, order_id)
            if order.gateway_order_ref is not None:
                # Lost a race with a concurrent request; the stored intent wins.
                logger.warning(
                    "Discarding gateway intent %s, order #%s already has %s",
                    intent.gateway_order_ref, order_id, order.gateway_order_ref,
                )
                return self._to_dto(order)
            order.attach_gateway_order(intent.gateway_order_ref)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("Order #%s linked to gateway order %s", order_id, intent.gateway_order_ref)
        return self._to_dto(order)

    def _load(self, user_id: str, order_id: int) -> Order:
        order = self._uow.orders.get_for_user(order_id, user_id)
        if order is None:
            raise EntityNotFoundError("Order not found")
        return order

    @staticmethod
    def _to_dto(order: Order) -> PaymentIntentDTO:
        return PaymentIntentDTO(
            order_id=order.id,  # type: ignore[arg-type]
            gateway_order_ref=order.gateway_order_ref,  # type: ignore[arg-type]
            amount=order.total_amount.amount,
            currency=order.total_amount.currency,
        )
