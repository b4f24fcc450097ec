"""End-to-end tests of the click CLI against a temporary JSON store."""

import json

import pytest
from click.testing import CliRunner

from storefront.infrastructure.cli import order_commands, payment_commands
from storefront.infrastructure.cli.main import cli
from tests.fakes import FakePaymentGateway

_ADDRESS = [
    "--line1", "12 MG Road",
    "--city", "Bengaluru",
    "--state", "KA",
    "--postal-code", "560001",
]


@pytest.fixture
def gateway(monkeypatch, tmp_path):
    for name in ("STOREFRONT_TOKEN", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STOREFRONT_DATA_DIR", str(tmp_path))
    fake = FakePaymentGateway()
    monkeypatch.setattr(order_commands, "payment_gateway", lambda: fake)
    monkeypatch.setattr(payment_commands, "payment_gateway", lambda: fake)
    return fake


def _run(*args: str):
    return CliRunner().invoke(cli, list(args))


def _ok(*args: str) -> str:
    result = _run(*args)
    assert result.exit_code == 0, result.output
    return result.output


def _token(output: str) -> str:
    for line in output.splitlines():
        if line.startswith("API token: "):
            return line.removeprefix("API token: ")
    raise AssertionError(f"no token in output:\n{output}")


def _store(tmp_path) -> dict:
    return json.loads((tmp_path / "store.json").read_text())


def _bootstrap_shop() -> tuple[str, str]:
    """Admin, one product (Widget, INR 100.00, stock 5) and a customer."""
    admin = _token(_ok("user", "register", "--email", "owner@example.com"))
    _ok("product", "add", "--name", "Widget", "--price", "10000", "--stock", "5", "--token", admin)
    alice = _token(_ok("user", "register", "--email", "alice@example.com", "--token", admin))
    return admin, alice


class TestCheckoutFlow:

    def test_order_pay_and_cancel(self, gateway, tmp_path):
        admin, alice = _bootstrap_shop()

        _ok("cart", "add", "--product", "1", "--quantity", "2", "--token", alice)
        [item] = _store(tmp_path)["carts"][0]["items"]

        output = _ok("order", "create", "--items", item["id"], *_ADDRESS, "--token", alice)
        assert "Order #1 created  (status=PAYMENT_PENDING)" in output
        assert "Pay INR 200.00 using gateway order order_gw1" in output

        payment_ref, signature = gateway.capture("order_gw1", 20000)
        verify = (
            "payment", "verify", "--order", "1", "--gateway-order", "order_gw1",
            "--payment", payment_ref, "--signature", signature, "--token", alice,
        )
        assert "Order confirmed" in _ok(*verify)
        assert "already confirmed" in _ok(*verify)

        store = _store(tmp_path)
        assert store["products"][0]["stock"] == 3
        assert store["carts"][0]["items"] == []

        output = _ok("admin", "set-status", "--id", "1", "--status", "CANCELLED", "--token", admin)
        assert "ORDER_CONFIRMED -> CANCELLED" in output
        assert "Stock restored" in output
        assert _store(tmp_path)["products"][0]["stock"] == 5

    def test_gateway_outage_reported_as_warning(self, gateway, tmp_path):
        _, alice = _bootstrap_shop()
        gateway.fail_create = True

        _ok("cart", "add", "--product", "1", "--token", alice)
        [item] = _store(tmp_path)["carts"][0]["items"]
        output = _ok("order", "create", "--items", item["id"], *_ADDRESS, "--token", alice)

        assert "Warning: Order created but payment gateway initialization failed" in output

        gateway.fail_create = False
        output = _ok("payment", "start", "--order", "1", "--token", alice)
        assert "gateway order order_gw1" in output

    def test_order_visible_only_to_owner(self, gateway, tmp_path):
        admin, alice = _bootstrap_shop()
        bob = _token(_ok("user", "register", "--email", "bob@example.com", "--token", admin))
        _ok("cart", "add", "--product", "1", "--token", alice)
        [item] = _store(tmp_path)["carts"][0]["items"]
        _ok("order", "create", "--items", item["id"], *_ADDRESS, "--token", alice)

        result = _run("order", "show", "--id", "1", "--token", bob)
        assert result.exit_code == 1
        assert "Order not found" in result.output
        assert "Order #1" in _ok("order", "show", "--id", "1", "--token", alice)
        assert "alice" not in _ok("order", "list", "--token", bob)


class TestAccessControl:

    def test_missing_token(self, gateway):
        _bootstrap_shop()
        result = _run("cart", "show")
        assert result.exit_code == 1
        assert "Authentication required" in result.output

    def test_token_from_environment(self, gateway, monkeypatch):
        _, alice = _bootstrap_shop()
        monkeypatch.setenv("STOREFRONT_TOKEN", alice)
        assert "Your cart is empty." in _ok("cart", "show")

    def test_customer_cannot_administer(self, gateway):
        _, alice = _bootstrap_shop()
        result = _run("product", "add", "--name", "Gizmo", "--price", "100", "--token", alice)
        assert result.exit_code == 1
        assert "Admin access required" in result.output

    def test_second_user_needs_admin(self, gateway):
        _bootstrap_shop()
        result = _run("user", "register", "--email", "eve@example.com")
        assert result.exit_code == 1
        assert "Admin access required" in result.output

    def test_rate_limited_product_creation(self, gateway):
        admin, _ = _bootstrap_shop()
        for n in range(9):
            _ok("product", "add", "--name", f"Item {n}", "--price", "100", "--token", admin)
        result = _run("product", "add", "--name", "One too many", "--price", "100", "--token", admin)
        assert result.exit_code == 1
        assert "Too many requests" in result.output


class TestErrorReporting:

    def test_invalid_status_choice(self, gateway):
        admin, _ = _bootstrap_shop()
        result = _run("admin", "set-status", "--id", "1", "--status", "ORDER_CONFIRMED", "--token", admin)
        assert result.exit_code == 2

    def test_unexpected_error_is_opaque(self, gateway, monkeypatch):
        _, alice = _bootstrap_shop()

        class Exploding:
            def __init__(self, uow):
                pass

            def handle(self, **kwargs):
                raise RuntimeError("secret internals")

        monkeypatch.setattr(order_commands, "ListOrdersHandler", Exploding)
        result = _run("order", "list", "--token", alice)

        assert result.exit_code == 1
        assert "An internal error occurred" in result.output
        assert "secret internals" not in result.output

    def test_product_listing(self, gateway):
        admin, _ = _bootstrap_shop()
        _ok("product", "update", "--id", "1", "--discount", "10", "--token", admin)
        output = _ok("product", "list")
        assert "Widget" in output
        assert "INR 90.00" in output
