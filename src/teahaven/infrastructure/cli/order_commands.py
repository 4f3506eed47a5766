"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from teahaven.application.checkout import CheckoutHandler
from teahaven.application.dto import CheckoutItemSpec, OrderDTO
from teahaven.application.show_order import (
    ListCustomerOrdersHandler,
    ListSellerOrdersHandler,
    ShowOrderHandler,
)
from teahaven.application.update_order_status import UpdateOrderStatusHandler
from teahaven.domain.exceptions import DomainException
from teahaven.domain.model.order import OrderStatus
from teahaven.domain.model.user import Role
from teahaven.infrastructure.bootstrap import (
    acting_user,
    notification_dispatcher,
    unit_of_work_factory,
)


def _parse_items(raw: str) -> list[CheckoutItemSpec]:
    """Parse '3:2,7:1' into CheckoutItemSpec list."""
    specs: list[CheckoutItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        id_str, qty_str = pair.rsplit(":", 1)
        try:
            product_id = int(id_str)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Product ID and quantity must be integers."
            )
        specs.append(CheckoutItemSpec(product_id=product_id, quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: #{dto.customer_id}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<31} {dto.total:>20}")


@click.command("checkout")
@click.option("--customer-id", required=True, type=int, help="Customer placing the order.")
@click.option("--address", required=True, help="Shipping address.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
def order_checkout(customer_id: int, address: str, items: str) -> None:
    """Place an order, reserving stock for every item."""
    specs = _parse_items(items)
    uow_factory = unit_of_work_factory()
    dispatcher = notification_dispatcher()

    try:
        user = acting_user(uow_factory, customer_id)
        handler = CheckoutHandler(uow_factory, dispatcher)
        dto = handler.handle(
            customer_id=user.id,  # type: ignore[arg-type]
            role=user.role,
            shipping_address=address,
            item_specs=specs,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    finally:
        # Let queued notifications go out before the process exits.
        dispatcher.shutdown(wait=True)

    click.echo(f"Order #{dto.id} placed")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(unit_of_work_factory())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user-id", required=True, type=int, help="Customer or seller ID.")
def order_list(user_id: int) -> None:
    """List a customer's orders, or the orders containing a seller's products."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, user_id)
        if user.role is Role.SELLER:
            orders = ListSellerOrdersHandler(uow_factory).handle(user_id, user.role)
        else:
            orders = ListCustomerOrdersHandler(uow_factory).handle(user_id, user.role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<12} {'Items':>5} {'Total':>12}  Created")
    click.echo("-" * 60)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.status:<12} {len(dto.items):>5} {dto.total:>12}  {dto.created_at}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--seller-id", required=True, type=int, help="Seller performing the update.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="New status.",
)
def order_status(order_id: int, seller_id: int, status: str) -> None:
    """Advance an order's status (sellers only, forward only)."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, seller_id)
        dto = UpdateOrderStatusHandler(uow_factory).handle(order_id, seller_id, user.role, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}.")
