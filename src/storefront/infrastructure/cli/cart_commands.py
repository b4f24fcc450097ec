"""CLI commands for the caller's cart."""

from __future__ import annotations

import click

from storefront.application.add_cart_item import AddCartItemHandler
from storefront.application.dto import CartDTO, CartItemSpec
from storefront.application.merge_cart import MergeCartHandler
from storefront.application.remove_cart_item import RemoveCartItemHandler
from storefront.application.show_cart import ShowCartHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.common import (
    authenticate,
    rate_limit,
    to_click_error,
    token_option,
)


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse 'P1:3,P2:5' into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(CartItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo("Your cart is empty.")
        return
    click.echo(f"  {'Item':<34} {'Product':<20} {'Qty':>4} {'Price':>14}")
    click.echo(f"  {'-'*75}")
    for line in dto.items:
        name = line.product_name if line.in_stock else f"{line.product_name} (unavailable)"
        click.echo(
            f"  {line.item_id:<34} {name:<20} {line.quantity:>4} {line.unit_price_display:>14}"
        )


@click.command("show")
@token_option
def cart_show(token: str | None) -> None:
    """Show the items in your cart."""
    handler = ShowCartHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        dto = handler.handle(identity.user_id)
    except DomainException as exc:
        raise to_click_error(exc)

    _display_cart(dto)


@click.command("add")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
@token_option
def cart_add(product_id: str, quantity: int, token: str | None) -> None:
    """Add a product to your cart."""
    handler = AddCartItemHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        dto = handler.handle(identity.user_id, product_id, quantity)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Added {quantity} x product {product_id} to your cart.")
    _display_cart(dto)


@click.command("remove")
@click.option("--item", "item_id", required=True, help="Cart item ID.")
@token_option
def cart_remove(item_id: str, token: str | None) -> None:
    """Remove one item from your cart."""
    handler = RemoveCartItemHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        handler.handle(identity.user_id, item_id)
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Removed item {item_id} from your cart.")


@click.command("merge")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@token_option
def cart_merge(items: str, token: str | None) -> None:
    """Merge a guest cart into your cart."""
    specs = _parse_items(items)
    handler = MergeCartHandler(uow=unit_of_work())

    try:
        identity = authenticate(token)
        rate_limit("cart:merge", identity)
        result = handler.handle(identity.user_id, specs)
    except DomainException as exc:
        raise to_click_error(exc)

    if result.skipped:
        click.echo(f"Skipped unavailable or invalid items: {', '.join(result.skipped)}")
    _display_cart(result.cart)
