"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import logging

import click

from storefront.application.dto import OrderDTO
from storefront.application.security import Identity, enforce_rate_limit, require_admin
from storefront.domain.exceptions import DomainException, FatalInternalError
from storefront.infrastructure.bootstrap import authenticator, rate_limiter

logger = logging.getLogger(__name__)

token_option = click.option(
    "--token",
    envvar="STOREFRONT_TOKEN",
    default=None,
    help="API token (defaults to $STOREFRONT_TOKEN).",
)


def to_click_error(exc: DomainException) -> click.ClickException:
    """Turn a domain error into a user-facing CLI error."""
    if isinstance(exc, FatalInternalError):
        logger.error("Internal error: %s", exc, exc_info=exc)
        return click.ClickException(FatalInternalError.public_message)
    return click.ClickException(str(exc))


def authenticate(token: str | None, admin: bool = False) -> Identity:
    identity = authenticator().resolve(token)
    if admin:
        require_admin(identity)
    return identity


def rate_limit(action: str, identity: Identity) -> None:
    enforce_rate_limit(rate_limiter(), action, identity.user_id)


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    if dto.paid_at:
        click.echo(f"Paid:     {dto.paid_at}  (payment {dto.payment_ref_masked})")
    if dto.gateway_order_ref:
        click.echo(f"Gateway:  {dto.gateway_order_ref}")
    click.echo("Ship to:")
    for line in dto.shipping_address.splitlines():
        click.echo(f"  {line}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Disc':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*62}")
    for item in dto.items:
        discount = f"{item.discount_percent}%" if item.discount_percent else "-"
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {discount:>5} "
            f"{item.unit_price_display:>14} {item.final_price_display:>14}"
        )
    click.echo(f"  {'-'*62}")
    click.echo(f"  {'Order Total':<32} {dto.total_display:>29}")
