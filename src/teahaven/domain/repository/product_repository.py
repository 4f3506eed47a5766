"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from teahaven.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int, *, for_update: bool = False) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def find_active_by_ids(self, product_ids: Iterable[int]) -> list[Product]:
        """Return the active products among *product_ids*, locked for update.

        Missing or inactive IDs are simply absent from the result.
        """

    @abstractmethod
    def list_active(self) -> list[Product]:
        """Return every active product in the catalog."""

    @abstractmethod
    def list_by_seller(self, seller_id: int) -> list[Product]:
        """Return every product owned by *seller_id*, active or not."""

    @abstractmethod
    def add(self, product: Product) -> Product:
        """Persist a new product and assign its ID."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist changes to an existing product."""

    @abstractmethod
    def decrement_stock(self, product_id: int, amount: int) -> Product:
        """Atomically draw *amount* units from a product's stock.

        Raises ConflictError if the stored stock no longer covers *amount*.
        """
