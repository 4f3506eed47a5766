"""Application service: Update Order Status use case.

Sellers advance the orders that contain their products.  Transitions
are forward-only (see ``Order.change_status``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from teahaven.application.dto import OrderDTO, order_to_dto
from teahaven.domain.exceptions import EntityNotFoundError, ForbiddenError, ValidationError
from teahaven.domain.model.order import OrderStatus
from teahaven.domain.model.user import Role
from teahaven.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int, seller_id: int, role: Role, status: str) -> OrderDTO:
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")

        try:
            new_status = OrderStatus(status.upper())
        except ValueError as exc:
            allowed = ", ".join(s.value for s in OrderStatus)
            raise ValidationError(f"Unknown status '{status}' (expected one of {allowed})") from exc

        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id, for_update=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            if not order.involves_seller(seller_id):
                raise ForbiddenError("You are not allowed to update this order")

            previous = order.status
            order.change_status(new_status)
            uow.orders.save_status(order)
            uow.commit()

        logger.info(
            "Order #%s moved from %s to %s by seller #%s",
            order_id, previous.value, new_status.value, seller_id,
        )
        return order_to_dto(order)
