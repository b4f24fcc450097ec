import logging

import click

from storefront.domain.exceptions import FatalInternalError
from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.admin_commands import (
    admin_orders,
    admin_set_status,
    admin_show,
)
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_merge,
    cart_remove,
    cart_show,
)
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_list,
    order_show,
)
from storefront.infrastructure.cli.payment_commands import (
    payment_fail,
    payment_start,
    payment_verify,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from storefront.infrastructure.cli.user_commands import user_register

logger = logging.getLogger("storefront")


class StorefrontGroup(click.Group):
    """Root group: unexpected errors are logged in full and shown opaquely."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception:
            logger.exception("Unhandled error in command %s", ctx.invoked_subcommand)
            raise click.ClickException(FatalInternalError.public_message)


@click.group(cls=StorefrontGroup)
def cli() -> None:
    """Storefront: orders, carts and payments."""
    try:
        level = settings().log_level
    except ValueError as exc:
        raise click.ClickException(str(exc))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def user() -> None:
    """Manage users."""


@cli.group()
def product() -> None:
    """Browse and manage products."""


@cli.group()
def cart() -> None:
    """Manage your cart."""


@cli.group()
def order() -> None:
    """Manage your orders."""


@cli.group()
def payment() -> None:
    """Pay for orders."""


@cli.group()
def admin() -> None:
    """Store administration."""


# Register subcommands
user.add_command(user_register)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_merge)
cart.add_command(cart_remove)
cart.add_command(cart_show)
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
payment.add_command(payment_fail)
payment.add_command(payment_start)
payment.add_command(payment_verify)
admin.add_command(admin_orders)
admin.add_command(admin_set_status)
admin.add_command(admin_show)
