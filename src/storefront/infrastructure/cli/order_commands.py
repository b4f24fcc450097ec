"""CLI commands for the caller's orders."""

from __future__ import annotations

import click

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import ShippingAddress
from storefront.infrastructure.bootstrap import payment_gateway, unit_of_work
from storefront.infrastructure.cli.common import (
    authenticate,
    display_order,
    rate_limit,
    to_click_error,
    token_option,
)


@click.command("create")
@click.option("--items", required=True, help="Cart item IDs, comma separated.")
@click.option("--line1", required=True, help="Address line 1.")
@click.option("--line2", default=None, help="Address line 2.")
@click.option("--city", required=True, help="City.")
@click.option("--state", required=True, help="State or region.")
@click.option("--postal-code", required=True, help="Postal code.")
@click.option("--country", default="IN", show_default=True, help="2-letter country code.")
@token_option
def order_create(
    items: str,
    line1: str,
    line2: str | None,
    city: str,
    state: str,
    postal_code: str,
    country: str,
    token: str | None,
) -> None:
    """Create an order from selected cart items and start payment."""
    handler = CreateOrderHandler(uow=unit_of_work(), gateway=payment_gateway())

    try:
        identity = authenticate(token)
        rate_limit("order:create", identity)
        address = ShippingAddress.create(
            line1=line1,
            line2=line2,
            city=city,
            state=state,
            postal_code=postal_code,
            country=country,
        )
        result = handler.handle(
            user_id=identity.user_id,
            cart_item_ids=items.split(","),
            shipping_address=address,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{result.order.id} created  (status={result.order.status})")
    click.echo()
    display_order(result.order)
    if result.payment is not None:
        click.echo()
        click.echo(
            f"Pay {result.order.total_display} using gateway order "
            f"{result.payment.gateway_order_ref}"
        )
    if result.warning:
        click.echo()
        click.echo(f"Warning: {result.warning}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@token_option
def order_show(order_id: int, token: str | None) -> None:
    """Show details of one of your orders."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        dto = handler.handle(order_id, user_id=identity.user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    display_order(dto)


@click.command("list")
@token_option
def order_list(token: str | None) -> None:
    """List your orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        orders = handler.handle(user_id=identity.user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<16} {'Items':>5} {'Total':>14}  Created")
    click.echo("-" * 66)
    for o in orders:
        click.echo(f"{o.id:<6} {o.status:<16} {o.item_count:>5} {o.total_display:>14}  {o.created_at}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@token_option
def order_cancel(order_id: int, token: str | None) -> None:
    """Cancel an order that has not been paid."""
    handler = CancelOrderHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        handler.handle(identity.user_id, order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{order_id} cancelled.")
