"""Application service: Add Product use case."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.application.dto import ProductDTO, product_to_dto
from teahaven.domain.exceptions import ForbiddenError, ValidationError
from teahaven.domain.model.product import Product
from teahaven.domain.model.user import Role
from teahaven.domain.model.value_objects import Money
from teahaven.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        seller_id: int,
        role: Role,
        name: str,
        price: str,
        stock: int,
        description: str = "",
        category: str = "",
    ) -> ProductDTO:
        """List a new product; it starts active only if it has stock."""
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        money = Money.of(price)
        if money.amount <= 0:
            raise ValidationError("Product price must be greater than zero")

        product = Product(
            id=None,
            name=name.strip(),
            description=description.strip(),
            category=category.strip(),
            price=money,
            stock=0,
            seller_id=seller_id,
        )
        product.set_stock(stock)

        with self._uow_factory() as uow:
            uow.products.add(product)
            uow.commit()
        return product_to_dto(product)
