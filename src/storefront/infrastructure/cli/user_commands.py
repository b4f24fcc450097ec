"""CLI commands for users and API tokens."""

from __future__ import annotations

import click

from storefront.application.register_user import RegisterUserHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.common import authenticate, to_click_error, token_option


@click.command("register")
@click.option("--email", required=True, help="Email address of the new user.")
@click.option("--admin", "is_admin", is_flag=True, default=False, help="Grant admin rights.")
@token_option
def user_register(email: str, is_admin: bool, token: str | None) -> None:
    """Register a user and print their API token.

    The first user of an empty store needs no token and becomes an admin.
    """
    handler = RegisterUserHandler(uow=unit_of_work())

    try:
        caller = authenticate(token) if token else None
        dto = handler.handle(email=email, is_admin=is_admin, caller=caller)
    except DomainException as exc:
        raise to_click_error(exc)

    role = "admin" if dto.is_admin else "customer"
    click.echo(f"User {dto.user_id} ({dto.email}) registered as {role}.")
    click.echo(f"API token: {dto.token}")
    click.echo("Store this token now; it cannot be shown again.")
