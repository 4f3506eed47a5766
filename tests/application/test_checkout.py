"""Integration tests for the Checkout use case.

Uses the in-memory fake store and an inline notification executor, so no
database, no threads.
"""

from decimal import Decimal

import pytest

from teahaven.application.checkout import CheckoutHandler
from teahaven.application.dto import CheckoutItemSpec
from teahaven.application.notifications import NotificationDispatcher
from teahaven.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ForbiddenError,
    InsufficientStockError,
    ValidationError,
)
from teahaven.domain.model.order import OrderStatus
from teahaven.domain.model.product import Product
from teahaven.domain.model.user import Role, User
from teahaven.domain.model.value_objects import Money
from tests.fakes import FakeStore, InlineExecutor, RecordingSender

CUSTOMER_ID = 1
SELLER_A = 2
SELLER_B = 3


def _users() -> list[User]:
    return [
        User(id=CUSTOMER_ID, email="alice@example.com", full_name="Alice Reed", role=Role.CUSTOMER),
        User(id=SELLER_A, email="mei@leafco.example", full_name="Mei Tan", role=Role.SELLER),
        User(id=SELLER_B, email="raj@chai.example", full_name="Raj Patel", role=Role.SELLER),
    ]


def _products() -> list[Product]:
    return [
        Product(id=1, name="Sencha", price=Money.of("12.50"), stock=50, seller_id=SELLER_A),
        Product(id=2, name="Gyokuro", price=Money.of("30.00"), stock=5, seller_id=SELLER_A),
        Product(id=3, name="Masala Chai", price=Money.of("8.25"), stock=3, seller_id=SELLER_B),
        Product(
            id=4, name="Retired Blend", price=Money.of("9.00"), stock=0,
            seller_id=SELLER_B, is_active=False,
        ),
    ]


def _setup(
    sender: RecordingSender | None = None,
) -> tuple[CheckoutHandler, FakeStore, RecordingSender]:
    """Build handler with a fake store pre-loaded with users and products."""
    store = FakeStore(products=_products(), users=_users())
    sender = sender or RecordingSender()
    dispatcher = NotificationDispatcher(sender, executor=InlineExecutor())
    handler = CheckoutHandler(store.unit_of_work, dispatcher)
    return handler, store, sender


def _checkout(handler: CheckoutHandler, *items: tuple[int, int], role: Role = Role.CUSTOMER):
    return handler.handle(
        customer_id=CUSTOMER_ID,
        role=role,
        shipping_address="1 Tea Lane, Leeds",
        item_specs=[CheckoutItemSpec(pid, qty) for pid, qty in items],
    )


def _stock(store: FakeStore) -> dict[int, int]:
    return {pid: p.stock for pid, p in store.state.products.items()}


class TestCheckoutHappyPath:

    def test_single_item(self):
        handler, store, _ = _setup()
        dto = _checkout(handler, (1, 2))

        assert dto.total == "$25.00"
        assert dto.status == "PENDING"
        assert dto.customer_id == CUSTOMER_ID
        assert store.product(1).stock == 48
        assert store.product(1).is_active is True

    def test_persists_order_with_items(self):
        handler, store, _ = _setup()
        dto = _checkout(handler, (1, 2), (3, 1))

        [order] = store.orders
        assert order.id == dto.id
        assert order.status == OrderStatus.PENDING
        assert order.shipping_address == "1 Tea Lane, Leeds"
        assert [(i.product_id, i.quantity.value) for i in order.items] == [(1, 2), (3, 1)]
        assert all(i.id is not None for i in order.items)

    def test_total_is_exact_decimal(self):
        handler, store, _ = _setup()
        _checkout(handler, (1, 3), (3, 3))

        [order] = store.orders
        assert order.total_amount.amount == Decimal("62.25")

    def test_depleting_stock_deactivates_product(self):
        handler, store, _ = _setup()
        _checkout(handler, (3, 3))

        assert store.product(3).stock == 0
        assert store.product(3).is_active is False

    def test_sequential_orders_get_distinct_ids(self):
        handler, _, _ = _setup()
        first = _checkout(handler, (1, 1))
        second = _checkout(handler, (1, 1))
        assert second.id == first.id + 1


class TestCheckoutAggregation:

    def test_duplicate_lines_checked_as_one(self):
        """[(p,2),(p,4)] must fail like [(p,6)] against stock 5."""
        handler, store, _ = _setup()

        with pytest.raises(InsufficientStockError) as info:
            _checkout(handler, (2, 2), (2, 4))

        assert info.value.requested == 6
        assert info.value.available == 5
        assert store.product(2).stock == 5

    def test_duplicate_lines_decrement_once_by_sum(self):
        handler, store, _ = _setup()
        _checkout(handler, (1, 2), (1, 3))

        assert store.product(1).stock == 45

    def test_duplicate_lines_kept_as_separate_items(self):
        handler, store, _ = _setup()
        dto = _checkout(handler, (1, 2), (1, 3))

        assert [i.quantity for i in dto.items] == [2, 3]
        assert dto.total == "$62.50"


class TestCheckoutPriceLock:

    def test_unit_price_frozen_at_checkout(self):
        handler, store, _ = _setup()
        _checkout(handler, (1, 1))

        store.product(1).update_price(Money.of("99.99"))

        [order] = store.orders
        assert order.items[0].unit_price == Money.of("12.50")
        assert order.total_amount == Money.of("12.50")


class TestCheckoutRejections:

    def test_seller_role_forbidden_before_store_access(self):
        handler, store, _ = _setup()

        with pytest.raises(ForbiddenError, match="Customer role required"):
            _checkout(handler, (1, 1), role=Role.SELLER)

        assert store.opened == 0

    @pytest.mark.parametrize("items", [[], [(1, 0)], [(1, -2)], [(0, 1)]])
    def test_malformed_items_rejected_before_store_access(self, items):
        handler, store, _ = _setup()

        with pytest.raises(ValidationError):
            _checkout(handler, *items)

        assert store.opened == 0

    def test_blank_address_rejected(self):
        handler, store, _ = _setup()
        with pytest.raises(ValidationError, match="Shipping address"):
            handler.handle(CUSTOMER_ID, Role.CUSTOMER, "  ", [CheckoutItemSpec(1, 1)])
        assert store.opened == 0

    def test_unknown_product_not_found(self):
        handler, store, sender = _setup()
        before = _stock(store)

        with pytest.raises(EntityNotFoundError, match="not found or inactive"):
            _checkout(handler, (1, 1), (999, 1))

        assert _stock(store) == before
        assert store.orders == []
        assert sender.confirmations == []

    def test_inactive_product_not_found(self):
        handler, store, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            _checkout(handler, (4, 1))
        assert store.orders == []

    def test_insufficient_stock_is_all_or_nothing(self):
        handler, store, sender = _setup()
        before = _stock(store)

        with pytest.raises(InsufficientStockError, match="Masala Chai"):
            _checkout(handler, (1, 10), (3, 4))

        assert _stock(store) == before
        assert store.orders == []
        assert store.commits == 0
        assert sender.confirmations == []

    def test_unknown_customer_not_found(self):
        handler, store, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Customer #42"):
            handler.handle(42, Role.CUSTOMER, "1 Tea Lane", [CheckoutItemSpec(1, 1)])
        assert store.orders == []

    def test_commit_conflict_leaves_nothing(self):
        handler, store, sender = _setup()
        store.fail_commit = True
        before = _stock(store)

        with pytest.raises(ConflictError):
            _checkout(handler, (1, 2))

        assert _stock(store) == before
        assert store.orders == []
        assert sender.confirmations == []


class TestCheckoutNotifications:

    def test_customer_confirmation_sent(self):
        handler, _, sender = _setup()
        dto = _checkout(handler, (1, 2))

        [summary] = sender.confirmations
        assert summary.order_id == dto.id
        assert summary.customer.email == "alice@example.com"
        assert summary.status == "PENDING"
        assert summary.total_amount == Money.of("25.00")
        assert summary.shipping_address == "1 Tea Lane, Leeds"
        assert [(i.product_name, i.quantity) for i in summary.items] == [("Sencha", 2)]

    def test_one_notification_per_distinct_seller(self):
        handler, _, sender = _setup()
        _checkout(handler, (1, 1), (2, 1), (3, 1))

        by_seller = {n.seller.id: n for n in sender.seller_notifications}
        assert len(sender.seller_notifications) == 2
        assert [i.product_name for i in by_seller[SELLER_A].items] == ["Sencha", "Gyokuro"]
        assert [i.product_name for i in by_seller[SELLER_B].items] == ["Masala Chai"]
        assert by_seller[SELLER_A].seller.email == "mei@leafco.example"

    def test_sender_failure_does_not_fail_checkout(self, caplog):
        handler, store, _ = _setup(RecordingSender(fail_customer=True, fail_sellers=True))

        with caplog.at_level("ERROR"):
            dto = _checkout(handler, (1, 2))

        assert dto.status == "PENDING"
        assert store.product(1).stock == 48
        assert len(store.orders) == 1
        assert "Failed to send customer confirmation" in caplog.text

    def test_dispatcher_refusing_work_does_not_fail_checkout(self, caplog):
        store = FakeStore(products=_products(), users=_users())
        dispatcher = NotificationDispatcher(RecordingSender(), max_workers=1)
        dispatcher.shutdown()
        handler = CheckoutHandler(store.unit_of_work, dispatcher)

        with caplog.at_level("ERROR"):
            dto = _checkout(handler, (1, 1))

        assert dto.id is not None
        assert "Could not schedule notifications" in caplog.text
