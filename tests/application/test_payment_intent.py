"""Integration tests for the CreatePaymentIntent (start / retry payment) use case."""

import pytest

from storefront.application.create_payment_intent import CreatePaymentIntentHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ExternalDependencyError,
    IllegalTransitionError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.service.payment_gateway import PaymentIntent
from tests.builders import OTHER_USER, USER, order, product
from tests.fakes import FakePaymentGateway, FakeUnitOfWork


def _setup(status=OrderStatus.PAYMENT_PENDING, gateway_order_ref=None, gateway=None):
    uow = FakeUnitOfWork(
        products=[product()],
        orders=[order(1, USER, status=status, gateway_order_ref=gateway_order_ref)],
    )
    gateway = gateway or FakePaymentGateway()
    return CreatePaymentIntentHandler(uow, gateway), uow, gateway


class TestCreateIntent:

    def test_creates_and_attaches_intent(self):
        handler, uow, gateway = _setup()

        dto = handler.handle(USER, 1)

        assert dto.gateway_order_ref == "order_gw1"
        assert dto.amount == 20000
        assert dto.currency == "INR"
        assert gateway.intents[0].amount == 20000
        assert uow.order(1).gateway_order_ref == "order_gw1"

    def test_existing_reference_reused(self):
        handler, uow, gateway = _setup(gateway_order_ref="order_existing")

        dto = handler.handle(USER, 1)

        assert dto.gateway_order_ref == "order_existing"
        assert gateway.intents == []

    def test_gateway_failure_leaves_order_pending(self):
        handler, uow, _ = _setup(gateway=FakePaymentGateway(fail_create=True))

        with pytest.raises(ExternalDependencyError):
            handler.handle(USER, 1)

        assert uow.order(1).status == OrderStatus.PAYMENT_PENDING
        assert uow.order(1).gateway_order_ref is None

    def test_mismatched_intent_amount_rejected(self):

        class ShortChangingGateway(FakePaymentGateway):
            def create_intent(self, amount, internal_order_id):
                return PaymentIntent("order_bad", amount.amount - 1, amount.currency)

        handler, uow, _ = _setup(gateway=ShortChangingGateway())

        with pytest.raises(ExternalDependencyError, match="mismatched amount"):
            handler.handle(USER, 1)

        assert uow.order(1).gateway_order_ref is None

    def test_concurrent_request_wins(self):
        uow = FakeUnitOfWork(products=[product()], orders=[order(1, USER, gateway_order_ref=None)])

        class RacingGateway(FakePaymentGateway):
            def create_intent(self, amount, internal_order_id):
                def attach(u):
                    o = u.orders.get_by_id(internal_order_id)
                    o.attach_gateway_order("order_winner")
                    u.orders.save(o)

                uow.mutate(attach)
                return super().create_intent(amount, internal_order_id)

        dto = CreatePaymentIntentHandler(uow, RacingGateway()).handle(USER, 1)

        assert dto.gateway_order_ref == "order_winner"
        assert uow.order(1).gateway_order_ref == "order_winner"


class TestRetryPayment:

    def test_failed_order_back_to_pending_with_same_reference(self):
        handler, uow, gateway = _setup(OrderStatus.PAYMENT_FAILED, gateway_order_ref="order_gw7")

        dto = handler.handle(USER, 1)

        assert dto.gateway_order_ref == "order_gw7"
        assert uow.order(1).status == OrderStatus.PAYMENT_PENDING
        assert gateway.intents == []

    def test_failed_order_without_reference_gets_new_intent(self):
        handler, uow, gateway = _setup(OrderStatus.PAYMENT_FAILED)

        dto = handler.handle(USER, 1)

        assert dto.gateway_order_ref == "order_gw1"
        assert uow.order(1).status == OrderStatus.PAYMENT_PENDING

    @pytest.mark.parametrize(
        "status", [OrderStatus.ORDER_CONFIRMED, OrderStatus.CANCELLED, OrderStatus.SHIPPED]
    )
    def test_other_statuses_rejected(self, status):
        handler, _, gateway = _setup(status, gateway_order_ref="order_gw1")
        with pytest.raises(IllegalTransitionError):
            handler.handle(USER, 1)
        assert gateway.intents == []

    def test_other_users_order_not_found(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle(OTHER_USER, 1)
