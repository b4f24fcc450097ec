"""CLI commands for the Product catalog."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.list_products import ListProductsHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import settings, unit_of_work
from storefront.infrastructure.cli.common import (
    authenticate,
    rate_limit,
    to_click_error,
    token_option,
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, type=int, help="Price in minor units (e.g. 9900 = 99.00).")
@click.option("--stock", default=0, show_default=True, type=int, help="Units in stock.")
@click.option("--discount", "discount_percent", default=None, type=int, help="Discount percent (0-100).")
@click.option("--inactive", is_flag=True, default=False, help="Create hidden from the catalog.")
@token_option
def product_add(
    name: str,
    price: int,
    stock: int,
    discount_percent: int | None,
    inactive: bool,
    token: str | None,
) -> None:
    """Add a new product to the catalog (admin)."""
    handler = AddProductHandler(uow=unit_of_work(), currency=settings().currency)

    try:
        identity = authenticate(token, admin=True)
        rate_limit("admin:products:create", identity)
        product = handler.handle(
            name=name,
            price=price,
            stock=stock,
            discount_percent=discount_percent,
            is_active=not inactive,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(f"Product #{product.id} '{product.name}' added at {product.unit_price}")


@click.command("list")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include inactive products (admin).")
@token_option
def product_list(include_inactive: bool, token: str | None) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(uow=unit_of_work())

    try:
        if include_inactive:
            authenticate(token, admin=True)
        products = handler.handle(include_inactive=include_inactive)
    except DomainException as exc:
        raise to_click_error(exc)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>14} {'Disc':>5} {'Stock':>6}")
    click.echo("-" * 55)
    for p in products:
        discount = f"{p.discount_percent}%" if p.discount_percent else "-"
        name = p.name if p.is_active else f"{p.name} (inactive)"
        click.echo(f"{p.id:<6} {name:<20} {str(p.unit_price):>14} {discount:>5} {p.stock:>6}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, type=int, help="New price in minor units.")
@click.option("--discount", "discount_percent", default=None, type=int, help="New discount percent.")
@click.option("--clear-discount", is_flag=True, default=False, help="Remove the discount.")
@click.option("--stock", default=None, type=int, help="New stock level.")
@click.option("--active/--inactive", "is_active", default=None, help="Show or hide the product.")
@token_option
def product_update(
    product_id: str,
    price: int | None,
    discount_percent: int | None,
    clear_discount: bool,
    stock: int | None,
    is_active: bool | None,
    token: str | None,
) -> None:
    """Update a product's price, discount, stock or visibility (admin)."""
    handler = UpdateProductHandler(uow=unit_of_work())

    try:
        authenticate(token, admin=True)
        product = handler.handle(
            product_id=product_id,
            price=price,
            discount_percent=discount_percent,
            clear_discount=clear_discount,
            stock=stock,
            is_active=is_active,
        )
    except DomainException as exc:
        raise to_click_error(exc)

    click.echo(
        f"Product #{product.id} updated: {product.unit_price}, stock {product.stock}, "
        f"{'active' if product.is_active else 'inactive'}"
    )
