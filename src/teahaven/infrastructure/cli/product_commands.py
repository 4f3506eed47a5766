"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from teahaven.application.add_product import AddProductHandler
from teahaven.application.list_products import ListProductsHandler
from teahaven.application.show_product import ListSellerProductsHandler, ShowProductHandler
from teahaven.application.update_product import UpdateProductHandler
from teahaven.application.update_stock import UpdateStockHandler
from teahaven.domain.exceptions import DomainException
from teahaven.infrastructure.bootstrap import acting_user, unit_of_work_factory


@click.command("add")
@click.option("--seller-id", required=True, type=int, help="Seller listing the product.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 12.50).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--category", default="", help="Category (e.g. Green Tea).")
@click.option("--description", default="", help="Free-text description.")
def product_add(
    seller_id: int, name: str, price: str, stock: int, category: str, description: str
) -> None:
    """Add a new product to the catalog."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, seller_id)
        product = AddProductHandler(uow_factory).handle(
            seller_id=seller_id,
            role=user.role,
            name=name,
            price=price,
            stock=stock,
            description=description,
            category=category,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price} "
        f"({product.stock} in stock)"
    )


@click.command("list")
@click.option("--search", default=None, help="Match name or description.")
@click.option("--category", default=None, help="Exact category.")
def product_list(search: str | None, category: str | None) -> None:
    """List active products in the catalog."""
    products = ListProductsHandler(unit_of_work_factory()).handle(search=search, category=category)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<14} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 64)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<24} {p.category:<14} {p.price:>10} {p.stock:>6}")


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_show(product_id: int) -> None:
    """Show one product."""
    try:
        p = ShowProductHandler(unit_of_work_factory()).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "active" if p.is_active else "inactive"
    click.echo(f"Product #{p.id}  {p.name}  ({state})")
    click.echo(f"  Seller:   #{p.seller_id}")
    click.echo(f"  Category: {p.category or '-'}")
    click.echo(f"  Price:    {p.price}")
    click.echo(f"  Stock:    {p.stock}")
    if p.description:
        click.echo(f"  {p.description}")


@click.command("mine")
@click.option("--seller-id", required=True, type=int, help="Seller whose products to list.")
def product_mine(seller_id: int) -> None:
    """List a seller's own products, inactive ones included."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, seller_id)
        products = ListSellerProductsHandler(uow_factory).handle(seller_id, user.role)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>10} {'Stock':>6}  State")
    click.echo("-" * 58)
    for p in products:
        state = "active" if p.is_active else "inactive"
        click.echo(f"{p.id:<6} {p.name:<24} {p.price:>10} {p.stock:>6}  {state}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--seller-id", required=True, type=int, help="Owning seller.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--category", default=None, help="New category.")
@click.option(
    "--visibility",
    type=click.Choice(["active", "inactive"], case_sensitive=False),
    default=None,
    help="List or hide the product.",
)
def product_update(
    product_id: int,
    seller_id: int,
    price: str | None,
    name: str | None,
    description: str | None,
    category: str | None,
    visibility: str | None,
) -> None:
    """Update a product's price, details or visibility."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, seller_id)
        product = UpdateProductHandler(uow_factory).handle(
            product_id,
            seller_id,
            user.role,
            price,
            name=name,
            description=description,
            category=category,
            is_active=None if visibility is None else visibility.lower() == "active",
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "active" if product.is_active else "inactive"
    click.echo(f"Product #{product.id} '{product.name}' updated: {product.price} ({state})")


@click.command("stock")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--seller-id", required=True, type=int, help="Owning seller.")
@click.option("--stock", required=True, type=int, help="New stock level.")
def product_stock(product_id: int, seller_id: int, stock: int) -> None:
    """Set a product's stock level (0 deactivates it)."""
    uow_factory = unit_of_work_factory()

    try:
        user = acting_user(uow_factory, seller_id)
        product = UpdateStockHandler(uow_factory).handle(product_id, seller_id, user.role, stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "active" if product.is_active else "inactive"
    click.echo(f"Product #{product.id} stock set to {product.stock} ({state})")
