"""CLI commands for paying for an order."""

from __future__ import annotations

import click

from storefront.application.create_payment_intent import CreatePaymentIntentHandler
from storefront.application.mark_payment_failed import MarkPaymentFailedHandler
from storefront.application.verify_payment import VerifyPaymentHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import payment_gateway, unit_of_work
from storefront.infrastructure.cli.common import (
    authenticate,
    rate_limit,
    to_click_error,
    token_option,
)


@click.command("start")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@token_option
def payment_start(order_id: int, token: str | None) -> None:
    """Create (or retry) the gateway payment for an order."""
    handler = CreatePaymentIntentHandler(uow=unit_of_work(), gateway=payment_gateway())

    try:
        identity = authenticate(token)
        dto = handler.handle(identity.user_id, order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(
        f"Order #{dto.order_id}: pay {dto.amount} ({dto.currency} minor units) "
        f"using gateway order {dto.gateway_order_ref}"
    )


@click.command("verify")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@click.option("--gateway-order", "gateway_order_ref", required=True, help="Gateway order ID.")
@click.option("--payment", "payment_ref", required=True, help="Gateway payment ID.")
@click.option("--signature", required=True, help="Signature from the payment callback.")
@token_option
def payment_verify(
    order_id: int,
    gateway_order_ref: str,
    payment_ref: str,
    signature: str,
    token: str | None,
) -> None:
    """Verify a completed payment and confirm the order."""
    handler = VerifyPaymentHandler(uow=unit_of_work(), gateway=payment_gateway())

    try:
        identity = authenticate(token)
        rate_limit("payment:verify", identity)
        dto = handler.handle(
            user_id=identity.user_id,
            order_id=order_id,
            gateway_order_ref=gateway_order_ref,
            payment_ref=payment_ref,
            signature=signature,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{dto.order_id}: {dto.message}")


@click.command("fail")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
@token_option
def payment_fail(order_id: int, token: str | None) -> None:
    """Record that the payment for an order failed or was abandoned."""
    handler = MarkPaymentFailedHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        dto = handler.handle(identity.user_id, order_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Order #{dto.order_id} status: {dto.status}")
