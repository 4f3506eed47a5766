"""Application service: catalog listing (query)."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.application.dto import ProductDTO, product_to_dto
from teahaven.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, search: str | None = None, category: str | None = None) -> list[ProductDTO]:
        """Return active products, optionally filtered.

        *search* matches name or description (case-insensitive substring);
        *category* must match exactly, ignoring case.
        """
        term = search.strip().lower() if search else ""
        wanted = category.strip().lower() if category else ""

        with self._uow_factory() as uow:
            products = uow.products.list_active()

        return [
            product_to_dto(p)
            for p in products
            if (not term or term in p.name.lower() or term in p.description.lower())
            and (not wanted or p.category.lower() == wanted)
        ]
