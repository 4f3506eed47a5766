"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from teahaven.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def create_with_items(self, order: Order) -> Order:
        """Insert a new order and all of its items; assigns IDs in place."""

    @abstractmethod
    def get_by_id(self, order_id: int, *, for_update: bool = False) -> Order | None:
        """Return an order by its ID, or None if not found.

        With *for_update* the order row stays locked until the unit of
        work ends.
        """

    @abstractmethod
    def list_by_customer(self, customer_id: int) -> list[Order]:
        """Return the customer's orders, newest first."""

    @abstractmethod
    def list_by_seller(self, seller_id: int) -> list[Order]:
        """Return orders containing at least one of the seller's products, newest first."""

    @abstractmethod
    def save_status(self, order: Order) -> None:
        """Persist the status and ``updated_at`` of an existing order."""
