"""Integration tests for the CreateOrder use case.

Uses in-memory fakes, no file I/O or network.
"""

import pytest

from storefront.application.create_order import GATEWAY_WARNING, CreateOrderHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money
from tests.builders import OTHER_USER, USER, address, cart, product
from tests.fakes import FakePaymentGateway, FakeUnitOfWork


def _setup(products=None, carts=None, gateway=None):
    if products is None:
        products = [
            product("1", "Widget", price=10000, stock=5, discount_percent=10),
            product("2", "Gadget", price=2500, stock=2),
        ]
    if carts is None:
        carts = [cart(USER, ("ci_1", "1", 2), ("ci_2", "2", 1))]
    uow = FakeUnitOfWork(products=products, carts=carts)
    gateway = gateway or FakePaymentGateway()
    return CreateOrderHandler(uow, gateway), uow, gateway


class TestCreateOrderHappyPath:

    def test_creates_pending_order_with_server_prices(self):
        handler, uow, _ = _setup()

        result = handler.handle(USER, ["ci_1", "ci_2"], address())

        assert result.order.status == "PAYMENT_PENDING"
        assert result.order.total_amount == 18000 + 2500
        assert [(i.product_id, i.unit_price, i.final_price) for i in result.order.items] == [
            ("1", 9000, 18000),
            ("2", 2500, 2500),
        ]
        assert result.warning is None

    def test_creates_gateway_intent_for_total(self):
        handler, uow, gateway = _setup()

        result = handler.handle(USER, ["ci_1", "ci_2"], address())

        assert len(gateway.intents) == 1
        assert gateway.intents[0].amount == 20500
        assert result.payment.gateway_order_ref == "order_gw1"
        assert result.order.gateway_order_ref == "order_gw1"
        assert uow.order(result.order.id).gateway_order_ref == "order_gw1"

    def test_does_not_touch_stock_or_cart(self):
        handler, uow, _ = _setup()

        handler.handle(USER, ["ci_1", "ci_2"], address())

        assert uow.product("1").stock == 5
        assert uow.product("2").stock == 2
        assert [i.id for i in uow.cart_of(USER).items] == ["ci_1", "ci_2"]

    def test_partial_selection(self):
        handler, uow, _ = _setup()

        result = handler.handle(USER, ["ci_2"], address())

        assert [i.product_id for i in result.order.items] == ["2"]
        assert result.order.total_amount == 2500

    def test_duplicate_ids_collapsed(self):
        handler, _, _ = _setup()
        result = handler.handle(USER, ["ci_1", " ci_1 "], address())
        assert len(result.order.items) == 1

    def test_sequential_ids(self):
        handler, _, _ = _setup()
        first = handler.handle(USER, ["ci_1"], address())
        second = handler.handle(USER, ["ci_2"], address())
        assert second.order.id == first.order.id + 1

    def test_price_read_at_creation_time(self):
        handler, uow, _ = _setup()

        def reprice(u):
            p = u.products.get_by_id("2")
            p.update_price(Money(3000))
            u.products.save(p)

        uow.mutate(reprice)
        result = handler.handle(USER, ["ci_2"], address())
        assert result.order.total_amount == 3000

    def test_later_price_change_does_not_affect_order(self):
        handler, uow, _ = _setup()
        result = handler.handle(USER, ["ci_2"], address())

        def reprice(u):
            p = u.products.get_by_id("2")
            p.update_price(Money(99900))
            u.products.save(p)

        uow.mutate(reprice)
        assert uow.order(result.order.id).total_amount == Money(2500)


class TestCreateOrderGatewayFailure:

    def test_order_kept_with_warning(self):
        handler, uow, _ = _setup(gateway=FakePaymentGateway(fail_create=True))

        result = handler.handle(USER, ["ci_1"], address())

        assert result.warning == GATEWAY_WARNING
        assert result.payment is None
        stored = uow.order(result.order.id)
        assert stored.status == OrderStatus.PAYMENT_PENDING
        assert stored.gateway_order_ref is None


class TestCreateOrderValidation:

    def test_no_selection_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="At least one item"):
            handler.handle(USER, [" ", ""], address())

    def test_too_many_ids_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Maximum 100 items"):
            handler.handle(USER, [f"ci_{n}" for n in range(101)], address())

    def test_missing_cart(self):
        handler, _, _ = _setup(carts=[])
        with pytest.raises(EntityNotFoundError, match="Cart not found"):
            handler.handle(USER, ["ci_1"], address())

    def test_foreign_item_ids_listed(self):
        handler, uow, _ = _setup()
        with pytest.raises(ValidationError, match="do not belong to your cart: nope"):
            handler.handle(USER, ["ci_1", "nope"], address())
        assert uow.all_orders() == []

    def test_other_users_cart_item_rejected(self):
        carts = [
            cart(USER, ("ci_1", "1", 1)),
            cart(OTHER_USER, ("ci_9", "2", 1)),
        ]
        handler, uow, _ = _setup(carts=carts)
        with pytest.raises(ValidationError, match="ci_9"):
            handler.handle(USER, ["ci_9"], address())
        assert uow.all_orders() == []

    def test_inactive_product_rejected(self):
        products = [product("1", "Widget", is_active=False), product("2", "Gadget")]
        handler, uow, _ = _setup(products=products)
        with pytest.raises(ValidationError, match="not available: 1"):
            handler.handle(USER, ["ci_1", "ci_2"], address())
        assert uow.all_orders() == []

    def test_deleted_product_rejected(self):
        handler, _, _ = _setup(products=[product("2", "Gadget")])
        with pytest.raises(ValidationError, match="not available: 1"):
            handler.handle(USER, ["ci_1"], address())

    def test_invalid_stored_quantity_rejected(self):
        handler, _, _ = _setup(carts=[cart(USER, ("ci_1", "1", 0))])
        with pytest.raises(ValidationError, match="Invalid quantity for item ci_1"):
            handler.handle(USER, ["ci_1"], address())

    def test_insufficient_stock_rejected_without_side_effects(self):
        handler, uow, gateway = _setup(carts=[cart(USER, ("ci_2", "2", 3))])
        with pytest.raises(InsufficientStockError, match="Gadget. Available: 2, Requested: 3"):
            handler.handle(USER, ["ci_2"], address())
        assert uow.all_orders() == []
        assert gateway.intents == []
        assert uow.product("2").stock == 2
