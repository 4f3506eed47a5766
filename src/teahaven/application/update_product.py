"""Application service: Update Product use case."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.application.dto import ProductDTO, product_to_dto
from teahaven.domain.exceptions import EntityNotFoundError, ForbiddenError, ValidationError
from teahaven.domain.model.product import Product
from teahaven.domain.model.user import Role
from teahaven.domain.model.value_objects import Money
from teahaven.domain.repository.unit_of_work import UnitOfWork


def load_owned_product(uow: UnitOfWork, product_id: int, seller_id: int) -> Product:
    """Fetch a product for modification, locked, checking the seller owns it."""
    product = uow.products.get_by_id(product_id, for_update=True)
    if product is None:
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
    if product.seller_id != seller_id:
        raise ForbiddenError("You can only modify your own products")
    return product


class UpdateProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        product_id: int,
        seller_id: int,
        role: Role,
        price: str | None = None,
        *,
        name: str | None = None,
        description: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
    ) -> ProductDTO:
        """Update a product's price, catalog text or visibility.

        Only the fields given are changed.  A new price does NOT affect
        existing orders; their items captured a price snapshot at
        creation time.
        """
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")
        if all(v is None for v in (price, name, description, category, is_active)):
            raise ValidationError("Nothing to update")
        new_price = Money.of(price) if price is not None else None

        with self._uow_factory() as uow:
            product = load_owned_product(uow, product_id, seller_id)
            if new_price is not None:
                product.update_price(new_price)
            product.update_details(name=name, description=description, category=category)
            if is_active is not None:
                product.set_active(is_active)
            uow.products.save(product)
            uow.commit()
        return product_to_dto(product)
