"""Application service: Checkout use case.

Turns a customer's requested items into a persisted order while drawing
down stock, all in one unit of work.  Notifications go out only after
the unit of work has committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from teahaven.application.dto import CheckoutItemSpec, OrderDTO, order_to_dto
from teahaven.application.notifications import NotificationDispatcher
from teahaven.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ForbiddenError,
    ValidationError,
)
from teahaven.domain.model.order import Order, OrderItem
from teahaven.domain.model.user import Role, User
from teahaven.domain.model.value_objects import Quantity
from teahaven.domain.repository.unit_of_work import UnitOfWork
from teahaven.domain.service.stock_reservation_service import (
    StockReservationService,
    aggregate_quantities,
)

logger = logging.getLogger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        dispatcher: NotificationDispatcher,
    ) -> None:
        self._uow_factory = uow_factory
        self._dispatcher = dispatcher

    def handle(
        self,
        customer_id: int,
        role: Role,
        shipping_address: str,
        item_specs: list[CheckoutItemSpec],
    ) -> OrderDTO:
        """Place an order for *item_specs* on behalf of a customer.

        Steps:
        1. Reject non-customers and malformed input before touching the store.
        2. Aggregate quantities per product so split lines cannot dodge
           the stock check.
        3. In one unit of work: lock and validate products, create the
           order with frozen unit prices, decrement stock, commit.
        4. Schedule customer and seller notifications.
        """
        if role is not Role.CUSTOMER:
            raise ForbiddenError("Customer role required")

        lines = self._validate(shipping_address, item_specs)
        quantities = aggregate_quantities((pid, qty.value) for pid, qty in lines)

        try:
            order, customer, sellers = self._place(customer_id, shipping_address, lines, quantities)
        except DomainException as exc:
            logger.warning("Checkout rejected for customer #%s: %s", customer_id, exc)
            raise

        logger.info(
            "Order #%s placed by customer #%s (%d items, total %s)",
            order.id, customer_id, len(order.items), order.total_amount,
        )
        self._notify(order, customer, sellers)
        return order_to_dto(order)

    # --- Transaction ----------------------------------------------------------

    def _place(
        self,
        customer_id: int,
        shipping_address: str,
        lines: list[tuple[int, Quantity]],
        quantities: dict[int, int],
    ) -> tuple[Order, User, dict[int, User]]:
        with self._uow_factory() as uow:
            customer = uow.users.get_by_id(customer_id)
            if customer is None:
                raise EntityNotFoundError(f"Customer #{customer_id} not found")

            reservations = StockReservationService(uow.products)
            products = reservations.check_availability(quantities)

            items = [
                OrderItem(
                    product_id=product_id,
                    product_name=products[product_id].name,
                    seller_id=products[product_id].seller_id,
                    quantity=qty,
                    unit_price=products[product_id].price,  # <-- price snapshot
                )
                for product_id, qty in lines
            ]
            order = Order.create(
                customer_id=customer_id,
                shipping_address=shipping_address,
                items=items,
            )
            uow.orders.create_with_items(order)
            reservations.reserve(quantities)

            sellers = uow.users.get_by_ids(order.seller_ids)
            uow.commit()

        return order, customer, sellers

    def _notify(self, order: Order, customer: User, sellers: dict[int, User]) -> None:
        try:
            self._dispatcher.notify_order_placed(order, customer, sellers)
        except Exception:
            logger.exception("Could not schedule notifications for order #%s", order.id)

    # --- Validation -----------------------------------------------------------

    @staticmethod
    def _validate(
        shipping_address: str, item_specs: list[CheckoutItemSpec]
    ) -> list[tuple[int, Quantity]]:
        if not shipping_address or not shipping_address.strip():
            raise ValidationError("Shipping address is required")
        if not item_specs:
            raise ValidationError("Order must contain at least one item")

        lines: list[tuple[int, Quantity]] = []
        for spec in item_specs:
            pid = spec.product_id
            if not isinstance(pid, int) or isinstance(pid, bool) or pid <= 0:
                raise ValidationError(f"Invalid product ID: {pid!r}")
            lines.append((pid, Quantity(spec.quantity)))
        return lines
