import click

from teahaven.infrastructure.bootstrap import settings
from teahaven.infrastructure.cli.order_commands import (
    order_checkout,
    order_list,
    order_show,
    order_status,
)
from teahaven.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_mine,
    product_show,
    product_stock,
    product_update,
)
from teahaven.infrastructure.cli.user_commands import db_init, user_add
from teahaven.infrastructure.config import ConfigurationError
from teahaven.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """Tea Haven: orders, catalog and checkout"""
    try:
        configure_logging(settings().log_level)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def user() -> None:
    """Manage users."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
db.add_command(db_init)
user.add_command(user_add)
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_mine)
product.add_command(product_show)
product.add_command(product_stock)
product.add_command(product_update)
