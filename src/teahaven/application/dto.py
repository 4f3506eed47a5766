"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from teahaven.domain.model.order import Order
from teahaven.domain.model.product import Product


@dataclass(frozen=True)
class CheckoutItemSpec:
    """Input: what the customer asked for (product ID + quantity)."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single order item as displayed to the user."""

    product_id: int
    product_name: str
    seller_id: int
    quantity: int
    unit_price: str  # formatted, e.g. "$12.50"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_id: int
    status: str
    shipping_address: str
    items: list[OrderItemDTO]
    total: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    description: str
    category: str
    price: str
    stock: int
    is_active: bool
    seller_id: int


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        status=order.status.value,
        shipping_address=order.shipping_address,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                seller_id=item.seller_id,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        updated_at=order.updated_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        description=product.description,
        category=product.category,
        price=str(product.price),
        stock=product.stock,
        is_active=product.is_active,
        seller_id=product.seller_id,
    )
