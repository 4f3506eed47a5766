"""Application services: order queries."""

from __future__ import annotations

from collections.abc import Callable

from teahaven.application.dto import OrderDTO, order_to_dto
from teahaven.domain.exceptions import EntityNotFoundError, ForbiddenError
from teahaven.domain.model.user import Role
from teahaven.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow_factory() as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListCustomerOrdersHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, customer_id: int, role: Role) -> list[OrderDTO]:
        if role is not Role.CUSTOMER:
            raise ForbiddenError("Customer role required")
        with self._uow_factory() as uow:
            orders = uow.orders.list_by_customer(customer_id)
        return [order_to_dto(o) for o in orders]


class ListSellerOrdersHandler:
    """Orders that contain at least one of the seller's products."""

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, seller_id: int, role: Role) -> list[OrderDTO]:
        if role is not Role.SELLER:
            raise ForbiddenError("Seller role required")
        with self._uow_factory() as uow:
            orders = uow.orders.list_by_seller(seller_id)
        return [order_to_dto(o) for o in orders]
