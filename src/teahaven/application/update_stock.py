"""Application service: Update Stock use case.

Seller restocks lock the product row exactly like a checkout does, so
the two never interleave on the same product.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from teahaven.application.dto import ProductDTO, product_to_dto
from teahaven.application.update_product import load_owned_product
from teahaven.domain.exceptions import ForbiddenError
from teahaven.domain.model.user import Role
from teahaven.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: int, seller_id: int, role: Role, stock: int) -> ProductDTO:
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")

        with self._uow_factory() as uow:
            product = load_owned_product(uow, product_id, seller_id)
            product.set_stock(stock)
            uow.products.save(product)
            uow.commit()

        logger.info("Product #%s stock set to %d by seller #%s", product_id, stock, seller_id)
        return product_to_dto(product)
