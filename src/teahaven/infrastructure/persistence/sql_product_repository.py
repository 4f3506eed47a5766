"""SQLAlchemy implementation of ProductRepository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import Update, select, update
from sqlalchemy.orm import Session

from teahaven.domain.exceptions import ConflictError, EntityNotFoundError
from teahaven.domain.model.product import Product
from teahaven.domain.model.value_objects import Money
from teahaven.domain.repository.product_repository import ProductRepository
from teahaven.infrastructure.persistence.database import ProductRow, utcnow


def stock_decrement_statement(product_id: int, amount: int) -> Update:
    """Conditional UPDATE drawing *amount* units from one product.

    The WHERE clause re-checks stock at write time.  ``is_active`` is
    assigned first so it reads the old stock on backends that apply SET
    assignments left to right (MySQL).
    """
    return (
        update(ProductRow)
        .where(ProductRow.id == product_id, ProductRow.stock >= amount)
        .ordered_values(
            (ProductRow.is_active, ProductRow.stock > amount),
            (ProductRow.stock, ProductRow.stock - amount),
            (ProductRow.updated_at, utcnow()),
        )
    )


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int, *, for_update: bool = False) -> Product | None:
        stmt = select(ProductRow).where(ProductRow.id == product_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = self._session.scalars(stmt).one_or_none()
        return None if row is None else self._to_domain(row)

    def find_active_by_ids(self, product_ids: Iterable[int]) -> list[Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return []
        # Lock in ID order so two checkouts never wait on each other in a cycle.
        stmt = (
            select(ProductRow)
            .where(ProductRow.id.in_(ids), ProductRow.is_active.is_(True))
            .order_by(ProductRow.id)
            .with_for_update()
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_active(self) -> list[Product]:
        stmt = (
            select(ProductRow)
            .where(ProductRow.is_active.is_(True))
            .order_by(ProductRow.created_at.desc(), ProductRow.id.desc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def list_by_seller(self, seller_id: int) -> list[Product]:
        stmt = (
            select(ProductRow)
            .where(ProductRow.seller_id == seller_id)
            .order_by(ProductRow.created_at.desc(), ProductRow.id.desc())
        )
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def add(self, product: Product) -> Product:
        row = ProductRow()
        self._apply(product, row)
        self._session.add(row)
        self._session.flush()
        product.id = row.id
        return product

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id)
        if row is None:
            raise EntityNotFoundError(f"Product with ID '{product.id}' not found")
        self._apply(product, row)
        self._session.flush()

    def decrement_stock(self, product_id: int, amount: int) -> Product:
        result = self._session.execute(
            stock_decrement_statement(product_id, amount)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConflictError(
                f"Stock for product #{product_id} changed during checkout; retry the order"
            )
        row = self._session.get(ProductRow, product_id, populate_existing=True)
        return self._to_domain(row)  # type: ignore[arg-type]

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _apply(product: Product, row: ProductRow) -> None:
        row.name = product.name
        row.description = product.description
        row.category = product.category
        row.price = product.price.amount
        row.stock = product.stock
        row.is_active = product.is_active
        row.seller_id = product.seller_id

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            description=row.description,
            category=row.category,
            price=Money.of(row.price),
            stock=row.stock,
            is_active=bool(row.is_active),
            seller_id=row.seller_id,
        )
