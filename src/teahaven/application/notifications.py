"""Order notifications: summaries, the sender port and the dispatcher.

Notifications run after the checkout transaction has committed. They are
best-effort: a failing sender is logged and forgotten, it never rolls
back or fails the order that triggered it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass

from teahaven.domain.exceptions import EntityNotFoundError
from teahaven.domain.model.order import Order
from teahaven.domain.model.user import User
from teahaven.domain.model.value_objects import Money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    id: int
    email: str
    full_name: str


@dataclass(frozen=True)
class SummaryItem:
    product_name: str
    quantity: int
    unit_price: Money
    seller: Recipient


@dataclass(frozen=True)
class OrderSummary:
    """Everything a notification needs to know about a placed order."""

    order_id: int
    status: str
    total_amount: Money
    shipping_address: str
    customer: Recipient
    items: tuple[SummaryItem, ...]


@dataclass(frozen=True)
class SellerNotification:
    """The part of an order that concerns one seller."""

    order_id: int
    shipping_address: str
    customer: Recipient
    seller: Recipient
    items: tuple[SummaryItem, ...]


class NotificationSender(ABC):
    """Port for the outbound message transport (SMTP, logging, ...)."""

    @abstractmethod
    def send_customer_confirmation(self, summary: OrderSummary) -> None:
        """Tell the customer their order was placed."""

    @abstractmethod
    def send_seller_notification(self, notification: SellerNotification) -> None:
        """Tell one seller which of their products were ordered."""


def _recipient(user: User) -> Recipient:
    return Recipient(id=user.id, email=user.email, full_name=user.full_name)  # type: ignore[arg-type]


def build_order_summary(order: Order, customer: User, sellers: dict[int, User]) -> OrderSummary:
    items = []
    for item in order.items:
        seller = sellers.get(item.seller_id)
        if seller is None:
            raise EntityNotFoundError(f"Seller #{item.seller_id} not found")
        items.append(
            SummaryItem(
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price,
                seller=_recipient(seller),
            )
        )
    return OrderSummary(
        order_id=order.id,  # type: ignore[arg-type]
        status=order.status.value,
        total_amount=order.total_amount,
        shipping_address=order.shipping_address,
        customer=_recipient(customer),
        items=tuple(items),
    )


def group_by_seller(summary: OrderSummary) -> list[SellerNotification]:
    """One notification per distinct seller, listing all of their items."""
    grouped: dict[int, list[SummaryItem]] = {}
    sellers: dict[int, Recipient] = {}
    for item in summary.items:
        grouped.setdefault(item.seller.id, []).append(item)
        sellers[item.seller.id] = item.seller
    return [
        SellerNotification(
            order_id=summary.order_id,
            shipping_address=summary.shipping_address,
            customer=summary.customer,
            seller=sellers[seller_id],
            items=tuple(items),
        )
        for seller_id, items in grouped.items()
    ]


class NotificationDispatcher:
    """Hands order notifications to a background worker pool.

    ``notify_order_placed`` returns immediately; the summary is built and
    every message sent on a worker thread.  Each send is attempted once.
    """

    def __init__(
        self,
        sender: NotificationSender,
        max_workers: int = 4,
        executor: Executor | None = None,
    ) -> None:
        self._sender = sender
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="teahaven-notify"
        )

    def notify_order_placed(
        self, order: Order, customer: User, sellers: dict[int, User]
    ) -> Future:
        return self._executor.submit(self._deliver, order, customer, sellers)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; with *wait*, drain what is queued."""
        self._executor.shutdown(wait=wait)

    # --- Worker side ----------------------------------------------------------

    def _deliver(self, order: Order, customer: User, sellers: dict[int, User]) -> None:
        try:
            summary = build_order_summary(order, customer, sellers)
        except Exception:
            logger.exception("Could not build notification summary for order #%s", order.id)
            return

        self._attempt(
            f"customer confirmation for order #{summary.order_id}",
            lambda: self._sender.send_customer_confirmation(summary),
        )
        for notification in group_by_seller(summary):
            self._attempt(
                f"seller notification for order #{summary.order_id} "
                f"to seller #{notification.seller.id}",
                lambda n=notification: self._sender.send_seller_notification(n),
            )

    @staticmethod
    def _attempt(description: str, send: Callable[[], None]) -> None:
        try:
            send()
        except Exception:
            logger.exception("Failed to send %s", description)
        else:
            logger.debug("Sent %s", description)
