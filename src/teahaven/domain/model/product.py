"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
sellers list them, reprice them and restock them; checkouts draw their
stock down.
"""

from __future__ import annotations

from dataclasses import dataclass

from teahaven.domain.exceptions import InsufficientStockError, ValidationError
from teahaven.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    Steady-state invariant after any stock change: ``is_active`` is True
    exactly when ``stock > 0``.  Between stock changes a seller may hide a
    stocked product, but never list one without stock.
    """

    id: int | None
    name: str
    price: Money
    stock: int
    seller_id: int
    description: str = ""
    category: str = ""
    is_active: bool = True

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because order items
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def update_details(
        self,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
    ) -> None:
        """Change catalog text; a field left as None is untouched."""
        if name is not None:
            if not name.strip():
                raise ValidationError("Product name is required")
            self.name = name.strip()
        if description is not None:
            self.description = description.strip()
        if category is not None:
            self.category = category.strip()

    def set_active(self, active: bool) -> None:
        """Hide a product from the catalog, or list it again.

        Only a product with stock can be listed.
        """
        if active and self.stock <= 0:
            raise ValidationError("Cannot activate a product with no stock")
        self.is_active = active

    def set_stock(self, stock: int) -> None:
        """Replace the stock level (seller restock or correction)."""
        if not isinstance(stock, int) or isinstance(stock, bool) or stock < 0:
            raise ValidationError("Stock must be a non-negative integer")
        self.stock = stock
        self.is_active = stock > 0

    def decrement_stock(self, quantity: int) -> None:
        """Draw *quantity* units down; deactivates the product when depleted."""
        if quantity <= 0:
            raise ValidationError("Decrement quantity must be positive")
        if quantity > self.stock:
            raise InsufficientStockError(self.name, quantity, self.stock)
        self.stock -= quantity
        self.is_active = self.stock > 0
