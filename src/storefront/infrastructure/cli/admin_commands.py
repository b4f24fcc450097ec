"""CLI commands for store administrators."""

from __future__ import annotations

import click

from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import (
    ADMIN_SETTABLE_STATUSES,
    UpdateOrderStatusHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.common import (
    authenticate,
    display_order,
    rate_limit,
    to_click_error,
    token_option,
)


@click.command("orders")
@click.option("--status", default=None, help="Only orders with this status.")
@token_option
def admin_orders(status: str | None, token: str | None) -> None:
    """List all orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work())

    try:
        authenticate(token, admin=True)
        orders = handler.handle(status=status)
    except DomainException as exc:
        raise to_click_error(exc)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'User':<38} {'Status':<16} {'Total':>14}")
    click.echo("-" * 77)
    for o in orders:
        click.echo(f"{o.id:<6} {o.user_id:<38} {o.status:<16} {o.total_display:>14}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@token_option
def admin_show(order_id: int, token: str | None) -> None:
    """Show any order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        authenticate(token, admin=True)
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"User: {dto.user_id}")
    display_order(dto)


@click.command("set-status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice(sorted(s.value for s in ADMIN_SETTABLE_STATUSES)),
    help="New status.",
)
@token_option
def admin_set_status(order_id: int, status: str, token: str | None) -> None:
    """Ship, deliver or cancel an order."""
    handler = UpdateOrderStatusHandler(uow=unit_of_work())

    try:
        identity = authenticate(token, admin=True)
        rate_limit("admin:orders:update", identity)
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{dto.order_id}: {dto.previous_status} -> {dto.status}")
    if dto.stock_restored:
        click.echo("Stock restored for all items.")
