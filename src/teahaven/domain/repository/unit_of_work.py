"""Abstract unit of work: one transaction spanning several repositories.

Application handlers open a unit of work per call and pass it, with the
repositories it exposes, through the whole read-check-write sequence:

    with uow_factory() as uow:
        product = uow.products.get_by_id(1, for_update=True)
        ...
        uow.commit()

Leaving the block without ``commit()`` (an exception, an abandoned
call) rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from teahaven.domain.repository.order_repository import OrderRepository
from teahaven.domain.repository.product_repository import ProductRepository
from teahaven.domain.repository.user_repository import UserRepository


class UnitOfWork(ABC):

    products: ProductRepository
    orders: OrderRepository
    users: UserRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this unit durable.

        Raises ConflictError when the store rejects the transaction
        because of a concurrent writer.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change. Safe to call after commit."""
