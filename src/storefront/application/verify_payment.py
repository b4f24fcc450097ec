"""Application service: Verify Payment use case.

Confirms an order exactly once after the gateway reports a completed
payment.  Fail-closed: every check must pass before the next runs, and
nothing is written until all of them have.

1. Order is fetched scoped by order id AND caller.
2. Already ORDER_CONFIRMED -> idempotent success, no side effects.
3. Any other status than PAYMENT_PENDING -> rejected.
4. Claimed gateway order reference must equal the stored one.
5. Signature over (gateway order, payment) must verify.
6. The payment is re-fetched from the gateway's own API: it must be
   captured, for the same gateway order, for exactly the order total.
7. One transaction re-checks status and stock, decrements stock,
   confirms the order and purges only the purchased cart items.

If stock ran out between checkout and payment the money is already
captured: the order is marked PAYMENT_FAILED in a separate transaction
and ReconciliationRequiredError is raised for manual follow-up.
"""

from __future__ import annotations

import logging

from storefront.application.dto import PaymentConfirmationDTO
from storefront.domain.exceptions import (
    EntityNotFoundError,
    IllegalTransitionError,
    InsufficientStockError,
    PaymentVerificationError,
    ReconciliationRequiredError,
    ValidationError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.payment_gateway import PaymentGateway
from storefront.domain.service.stock_service import StockService

logger = logging.getLogger(__name__)


def _require(value: str | None, field_name: str, max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned or len(cleaned) > max_length:
        raise ValidationError(f"Missing or invalid {field_name}")
    return cleaned


class VerifyPaymentHandler:

    def __init__(self, uow: UnitOfWork, gateway: PaymentGateway) -> None:
        self._uow = uow
        self._gateway = gateway

    def handle(
        self,
        user_id: str,
        order_id: int,
        gateway_order_ref: str,
        payment_ref: str,
        signature: str,
    ) -> PaymentConfirmationDTO:
        gateway_order_ref = _require(gateway_order_ref, "gateway order id", 100)
        payment_ref = _require(payment_ref, "payment id", 100)
        signature = _require(signature, "signature", 200)

        with self._uow:
            order = self._uow.orders.get_for_user(order_id, user_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

        if order.status == OrderStatus.ORDER_CONFIRMED:
            return self._already_confirmed(order)
        if order.status != OrderStatus.PAYMENT_PENDING:
            raise IllegalTransitionError(order.status, OrderStatus.ORDER_CONFIRMED)

        self._verify_with_gateway(order, gateway_order_ref, payment_ref, signature)

        try:
            return self._confirm(order.id, payment_ref, signature)  # type: ignore[arg-type]
        except InsufficientStockError as exc:
            self._mark_failed(order.id, payment_ref)  # type: ignore[arg-type]
            logger.error(
                "Order #%s: payment %s captured but stock is insufficient (%s); "
                "manual reconciliation required",
                order.id, payment_ref, exc,
            )
            raise ReconciliationRequiredError(order.id, payment_ref, exc) from exc  # type: ignore[arg-type]

    # --- Verification steps ---------------------------------------------------

    def _verify_with_gateway(
        self,
        order: Order,
        gateway_order_ref: str,
        payment_ref: str,
        signature: str,
    ) -> None:
        if order.gateway_order_ref != gateway_order_ref:
            logger.warning("Order #%s: gateway order id mismatch", order.id)
            raise PaymentVerificationError("Gateway order ID mismatch")

        if not self._gateway.verify_signature(gateway_order_ref, payment_ref, signature):
            logger.warning(
                "Order #%s: invalid payment signature (gateway order %s, payment %s)",
                order.id, gateway_order_ref, payment_ref,
            )
            raise PaymentVerificationError("Payment verification failed. Invalid signature.")

        payment = self._gateway.fetch_payment(payment_ref)
        if payment is None:
            raise PaymentVerificationError("Payment not found at the payment gateway")
        if not payment.is_captured:
            raise PaymentVerificationError(
                f"Payment not successful. Status: {payment.status}"
            )
        if payment.gateway_order_ref != gateway_order_ref:
            raise PaymentVerificationError("Payment order ID mismatch")
        if (
            payment.amount != order.total_amount.amount
            or payment.currency != order.total_amount.currency
        ):
            logger.error(
                "Order #%s: amount mismatch, expected %s received %s %s",
                order.id, order.total_amount, payment.amount, payment.currency,
            )
            raise PaymentVerificationError("Payment amount mismatch")

    # --- Transactions ---------------------------------------------------------

    def _confirm(self, order_id: int, payment_ref: str, signature: str) -> PaymentConfirmationDTO:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

            # A concurrent duplicate callback may have confirmed it meanwhile.
            if order.status == OrderStatus.ORDER_CONFIRMED:
                return self._already_confirmed(order)
            if order.status != OrderStatus.PAYMENT_PENDING:
                raise IllegalTransitionError(order.status, OrderStatus.ORDER_CONFIRMED)

            StockService(self._uow.products).decrement_for_order(order)
            order.confirm_payment(payment_ref, signature)
            self._uow.orders.save(order)

            cart = self._uow.carts.get_by_user_id(order.user_id)
            if cart is not None:
                removed = cart.remove_products(order.product_ids)
                if removed:
                    self._uow.carts.save(cart)

            self._uow.commit()

        logger.info("Order #%s confirmed with payment %s", order_id, payment_ref)
        return PaymentConfirmationDTO(
            order_id=order_id,
            status=OrderStatus.ORDER_CONFIRMED.value,
            already_confirmed=False,
            message="Payment verified successfully. Order confirmed.",
        )

    def _mark_failed(self, order_id: int, payment_ref: str) -> None:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None or order.status != OrderStatus.PAYMENT_PENDING:
                return
            order.mark_payment_failed(payment_ref)
            self._uow.orders.save(order)
            self._uow.commit()

    @staticmethod
    def _already_confirmed(order: Order) -> PaymentConfirmationDTO:
        return PaymentConfirmationDTO(
            order_id=order.id,  # type: ignore[arg-type]
            status=OrderStatus.ORDER_CONFIRMED.value,
            already_confirmed=True,
            message="Order already confirmed",
        )
