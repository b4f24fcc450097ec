"""Unit tests for the Order aggregate."""

import pytest

from storefront.domain.exceptions import IllegalTransitionError, ValidationError
from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Money
from tests.builders import address, product


def _create(*lines) -> Order:
    items = [OrderItem.snapshot(p, q) for p, q in lines]
    return Order.create(user_id="user_1", items=items, shipping_address=address())


class TestOrderItemSnapshot:

    def test_copies_discounted_price(self):
        item = OrderItem.snapshot(product(price=10000, discount_percent=10), 2)
        assert item.unit_price == Money(9000)
        assert item.discount_percent == 10
        assert item.final_price == Money(18000)
        assert item.product_name == "Widget"

    def test_zero_discount_stored_as_none(self):
        item = OrderItem.snapshot(product(discount_percent=0), 1)
        assert item.discount_percent is None

    def test_snapshot_ignores_later_price_change(self):
        p = product(price=10000)
        item = OrderItem.snapshot(p, 1)
        p.update_price(Money(99900))
        assert item.unit_price == Money(10000)

    def test_invalid_quantity_rejected(self):
        with pytest.raises(ValidationError):
            OrderItem.snapshot(product(), 100)


class TestOrderCreation:

    def test_create_sets_payment_pending(self):
        order = _create((product(), 1))
        assert order.status == OrderStatus.PAYMENT_PENDING
        assert order.id is None
        assert order.gateway_order_ref is None

    def test_total_is_sum_of_final_prices(self):
        order = _create(
            (product("1", "Widget", price=10000, discount_percent=10), 2),
            (product("2", "Gadget", price=2500), 1),
        )
        assert order.total_amount == Money(20500)
        assert order.total_amount == order.items_total

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="At least one item"):
            Order.create(user_id="user_1", items=[], shipping_address=address())

    def test_zero_total_rejected(self):
        with pytest.raises(ValidationError, match="Invalid order amount"):
            _create((product(discount_percent=100), 1))

    def test_missing_user_rejected(self):
        item = OrderItem.snapshot(product(), 1)
        with pytest.raises(ValidationError, match="belong to a user"):
            Order.create(user_id="", items=[item], shipping_address=address())


class TestPaymentLifecycle:

    def test_attach_gateway_order_once(self):
        order = _create((product(), 1))
        order.attach_gateway_order("order_gw1")
        assert order.gateway_order_ref == "order_gw1"
        with pytest.raises(ValidationError, match="already has a gateway order"):
            order.attach_gateway_order("order_gw2")

    def test_confirm_payment_records_refs(self):
        order = _create((product(), 1))
        order.confirm_payment("pay_1", "sig")
        assert order.status == OrderStatus.ORDER_CONFIRMED
        assert order.gateway_payment_ref == "pay_1"
        assert order.gateway_signature == "sig"
        assert order.paid_at is not None
        assert order.stock_is_committed

    def test_confirm_twice_rejected(self):
        order = _create((product(), 1))
        order.confirm_payment("pay_1", "sig")
        with pytest.raises(IllegalTransitionError):
            order.confirm_payment("pay_1", "sig")

    def test_mark_failed_keeps_payment_ref(self):
        order = _create((product(), 1))
        order.mark_payment_failed("pay_9")
        assert order.status == OrderStatus.PAYMENT_FAILED
        assert order.gateway_payment_ref == "pay_9"
        assert order.paid_at is None

    def test_retry_after_failure(self):
        order = _create((product(), 1))
        order.attach_gateway_order("order_gw1")
        order.mark_payment_failed()
        order.retry_payment()
        assert order.status == OrderStatus.PAYMENT_PENDING
        assert order.gateway_order_ref == "order_gw1"

    def test_product_ids(self):
        order = _create((product("1", "Widget"), 1), (product("2", "Gadget"), 3))
        assert order.product_ids == {"1", "2"}

    def test_is_owned_by(self):
        order = _create((product(), 1))
        assert order.is_owned_by("user_1")
        assert not order.is_owned_by("user_2")
