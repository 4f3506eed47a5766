"""Application services: single product and seller catalog queries."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.application.dto import ProductDTO, product_to_dto
from teahaven.domain.exceptions import EntityNotFoundError, ForbiddenError
from teahaven.domain.model.user import Role
from teahaven.domain.repository.unit_of_work import UnitOfWork


class ShowProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: int) -> ProductDTO:
        """Return one product, whether or not it is currently listed."""
        with self._uow_factory() as uow:
            product = uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product_to_dto(product)


class ListSellerProductsHandler:
    """A seller's own products, inactive ones included, newest first."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, seller_id: int, role: Role) -> list[ProductDTO]:
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")
        with self._uow_factory() as uow:
            products = uow.products.list_by_seller(seller_id)
        return [product_to_dto(p) for p in products]
