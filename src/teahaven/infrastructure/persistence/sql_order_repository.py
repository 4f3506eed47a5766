"""SQLAlchemy implementation of OrderRepository."""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from teahaven.domain.exceptions import EntityNotFoundError
from teahaven.domain.model.order import Order, OrderItem, OrderStatus
from teahaven.domain.model.value_objects import Money, Quantity
from teahaven.domain.repository.order_repository import OrderRepository
from teahaven.infrastructure.persistence.database import (
    OrderItemRow,
    OrderRow,
    ProductRow,
    as_utc,
)


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def create_with_items(self, order: Order) -> Order:
        row = OrderRow(
            customer_id=order.customer_id,
            status=order.status.value,
            shipping_address=order.shipping_address,
            total_amount=order.total_amount.amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRow(
                    product_id=item.product_id,
                    quantity=item.quantity.value,
                    unit_price=item.unit_price.amount,
                )
                for item in order.items
            ],
        )
        self._session.add(row)
        self._session.flush()

        order.id = row.id
        for item, item_row in zip(order.items, row.items):
            item.id = item_row.id
        return order

    def get_by_id(self, order_id: int, *, for_update: bool = False) -> Order | None:
        stmt = self._select().where(OrderRow.id == order_id)
        if for_update:
            stmt = stmt.with_for_update(of=OrderRow)
        row = self._session.scalars(stmt).one_or_none()
        return None if row is None else self._to_domain(row)

    def list_by_customer(self, customer_id: int) -> list[Order]:
        stmt = self._newest_first(self._select().where(OrderRow.customer_id == customer_id))
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_by_seller(self, seller_id: int) -> list[Order]:
        stmt = self._newest_first(
            self._select().where(
                OrderRow.items.any(OrderItemRow.product.has(ProductRow.seller_id == seller_id))
            )
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def save_status(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id)
        if row is None:
            raise EntityNotFoundError(f"Order #{order.id} not found")
        row.status = order.status.value
        row.updated_at = order.updated_at
        self._session.flush()

    # --- Queries --------------------------------------------------------------

    @staticmethod
    def _select() -> Select:
        return select(OrderRow).options(
            selectinload(OrderRow.items).selectinload(OrderItemRow.product)
        )

    @staticmethod
    def _newest_first(stmt: Select) -> Select:
        return stmt.order_by(OrderRow.created_at.desc(), OrderRow.id.desc())

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        items = [
            OrderItem(
                id=i.id,
                product_id=i.product_id,
                product_name=i.product.name,
                seller_id=i.product.seller_id,
                quantity=Quantity(i.quantity),
                unit_price=Money.of(i.unit_price),
            )
            for i in row.items
        ]
        return Order(
            id=row.id,
            customer_id=row.customer_id,
            shipping_address=row.shipping_address,
            items=items,
            total_amount=Money.of(row.total_amount),
            status=OrderStatus(row.status),
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
