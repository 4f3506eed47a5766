"""CLI commands for users and the database schema."""

from __future__ import annotations

import click

from teahaven.application.add_user import AddUserHandler
from teahaven.domain.exceptions import DomainException
from teahaven.domain.model.user import Role
from teahaven.infrastructure.bootstrap import engine, unit_of_work_factory
from teahaven.infrastructure.persistence.database import init_schema


@click.command("add")
@click.option("--email", required=True, help="Email address (unique).")
@click.option("--name", "full_name", required=True, help="Full name.")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    default=Role.CUSTOMER.value,
    show_default=True,
)
def user_add(email: str, full_name: str, role: str) -> None:
    """Register a customer or seller."""
    try:
        user = AddUserHandler(unit_of_work_factory()).handle(email, full_name, role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User #{user.id} {user.email} registered as {user.role.value}")


@click.command("init")
def db_init() -> None:
    """Create any missing tables."""
    init_schema(engine())
    click.echo("Database schema is up to date.")
