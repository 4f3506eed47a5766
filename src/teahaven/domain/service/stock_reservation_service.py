"""Domain service: Stock Reservation.

This service coordinates the cross-aggregate part of a checkout:
drawing stock from several products for one order.  It lives in the
domain layer because the availability rules are core business rules,
not just orchestration.

The two-phase approach (validate-then-mutate) ensures we never leave
stock partially decremented if one product fails validation.  Both
phases must run inside the same unit of work.
"""

from __future__ import annotations

from collections.abc import Iterable

from teahaven.domain.exceptions import EntityNotFoundError, InsufficientStockError
from teahaven.domain.model.product import Product
from teahaven.domain.repository.product_repository import ProductRepository


def aggregate_quantities(lines: Iterable[tuple[int, int]]) -> dict[int, int]:
    """Sum quantities per product ID, keeping first-seen order.

    ``[(7, 2), (7, 3)]`` must be checked exactly like ``[(7, 5)]``.
    """
    totals: dict[int, int] = {}
    for product_id, quantity in lines:
        totals[product_id] = totals.get(product_id, 0) + quantity
    return totals


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def check_availability(self, quantities: dict[int, int]) -> dict[int, Product]:
        """Phase 1: load every product (locked) and validate stock.

        Fails fast before any mutation:
          - a missing or inactive product -> EntityNotFoundError
          - stock below the aggregated quantity -> InsufficientStockError
        """
        products = self._product_repo.find_active_by_ids(quantities.keys())
        if len(products) < len(quantities):
            raise EntityNotFoundError("One or more products were not found or inactive")

        by_id = {p.id: p for p in products}
        for product_id, qty in quantities.items():
            product = by_id.get(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product {product_id} not found")
            if product.stock < qty:
                raise InsufficientStockError(product.name, qty, product.stock)
        return by_id

    def reserve(self, quantities: dict[int, int]) -> list[Product]:
        """Phase 2: decrement each product once by its aggregated quantity."""
        return [
            self._product_repo.decrement_stock(product_id, qty)
            for product_id, qty in quantities.items()
        ]
