"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its items. Items are created
together with the order and never outlive it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from teahaven.domain.exceptions import ValidationError
from teahaven.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"

    @property
    def rank(self) -> int:
        return list(OrderStatus).index(self)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderItem:
    """Captures the price snapshot of a product at order-creation time.

    ``unit_price`` is never re-derived from the live product.
    """

    product_id: int
    product_name: str
    seller_id: int
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    id: int | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it validates the
    input and derives the total. ``__init__`` stays simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: int
    shipping_address: str
    items: list[OrderItem]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: int,
        shipping_address: str,
        items: list[OrderItem],
    ) -> Order:
        if not shipping_address or not shipping_address.strip():
            raise ValidationError("Shipping address is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        total = Money.zero()
        for item in items:
            total = total + item.line_total

        now = _utcnow()
        return Order(
            id=None,
            customer_id=customer_id,
            shipping_address=shipping_address.strip(),
            items=list(items),
            total_amount=total,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus) -> None:
        """Move the order forward to *new_status*.

        Later statuses may be reached directly (PENDING -> SHIPPED is
        allowed); staying put or moving backwards is rejected.
        """
        if new_status.rank <= self.status.rank:
            raise ValidationError(
                f"Cannot change order status from {self.status.value} "
                f"to {new_status.value}"
            )
        self.status = new_status
        self.updated_at = _utcnow()

    # --- Queries --------------------------------------------------------------

    @property
    def seller_ids(self) -> set[int]:
        return {item.seller_id for item in self.items}

    def involves_seller(self, seller_id: int) -> bool:
        return seller_id in self.seller_ids
