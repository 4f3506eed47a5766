"""Integration tests for order status updates and order queries."""

import pytest

from teahaven.application.checkout import CheckoutHandler
from teahaven.application.dto import CheckoutItemSpec
from teahaven.application.notifications import NotificationDispatcher
from teahaven.application.show_order import (
    ListCustomerOrdersHandler,
    ListSellerOrdersHandler,
    ShowOrderHandler,
)
from teahaven.application.update_order_status import UpdateOrderStatusHandler
from teahaven.domain.exceptions import EntityNotFoundError, ForbiddenError, ValidationError
from teahaven.domain.model.order import OrderStatus
from teahaven.domain.model.product import Product
from teahaven.domain.model.user import Role, User
from teahaven.domain.model.value_objects import Money
from tests.fakes import FakeStore, InlineExecutor, RecordingSender


def _setup() -> FakeStore:
    store = FakeStore(
        users=[
            User(id=1, email="alice@example.com", full_name="Alice Reed", role=Role.CUSTOMER),
            User(id=2, email="mei@leafco.example", full_name="Mei Tan", role=Role.SELLER),
            User(id=3, email="raj@chai.example", full_name="Raj Patel", role=Role.SELLER),
            User(id=4, email="bo@example.com", full_name="Bo Lin", role=Role.CUSTOMER),
        ],
        products=[
            Product(id=1, name="Sencha", price=Money.of("12.50"), stock=50, seller_id=2),
            Product(id=2, name="Masala Chai", price=Money.of("8.25"), stock=50, seller_id=3),
        ],
    )
    return store


def _place(store: FakeStore, customer_id: int, *items: tuple[int, int]) -> int:
    dispatcher = NotificationDispatcher(RecordingSender(), executor=InlineExecutor())
    dto = CheckoutHandler(store.unit_of_work, dispatcher).handle(
        customer_id, Role.CUSTOMER, "1 Tea Lane",
        [CheckoutItemSpec(pid, qty) for pid, qty in items],
    )
    return dto.id


class TestUpdateOrderStatus:

    def test_seller_advances_order(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))

        dto = UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 2, Role.SELLER, "processing")

        assert dto.status == "PROCESSING"
        assert store.state.orders[order_id].status == OrderStatus.PROCESSING

    def test_order_row_locked_while_status_changes(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))

        UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 2, Role.SELLER, "SHIPPED")

        assert ("order", order_id) in store.state.locks

    def test_seller_may_skip_ahead(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))

        dto = UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 2, Role.SELLER, "DELIVERED")
        assert dto.status == "DELIVERED"

    def test_backwards_rejected_and_not_persisted(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))
        handler = UpdateOrderStatusHandler(store.unit_of_work)
        handler.handle(order_id, 2, Role.SELLER, "SHIPPED")

        with pytest.raises(ValidationError, match="from SHIPPED to PENDING"):
            handler.handle(order_id, 2, Role.SELLER, "PENDING")

        assert store.state.orders[order_id].status == OrderStatus.SHIPPED

    def test_customer_role_forbidden(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))
        with pytest.raises(ForbiddenError, match="Seller role required"):
            UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 1, Role.CUSTOMER, "SHIPPED")

    def test_seller_without_items_forbidden(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))
        with pytest.raises(ForbiddenError, match="not allowed to update this order"):
            UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 3, Role.SELLER, "SHIPPED")

    def test_unknown_order_rejected(self):
        store = _setup()
        with pytest.raises(EntityNotFoundError, match="Order #999 not found"):
            UpdateOrderStatusHandler(store.unit_of_work).handle(999, 2, Role.SELLER, "SHIPPED")

    def test_unknown_status_rejected(self):
        store = _setup()
        order_id = _place(store, 1, (1, 1))
        with pytest.raises(ValidationError, match="Unknown status 'LOST'"):
            UpdateOrderStatusHandler(store.unit_of_work).handle(order_id, 2, Role.SELLER, "LOST")


class TestOrderQueries:

    def test_show_order(self):
        store = _setup()
        order_id = _place(store, 1, (1, 2))

        dto = ShowOrderHandler(store.unit_of_work).handle(order_id)
        assert dto.id == order_id
        assert dto.items[0].product_name == "Sencha"
        assert dto.items[0].unit_price == "$12.50"
        assert dto.items[0].line_total == "$25.00"

    def test_show_unknown_order(self):
        store = _setup()
        with pytest.raises(EntityNotFoundError, match="Order #5 not found"):
            ShowOrderHandler(store.unit_of_work).handle(5)

    def test_customer_sees_only_own_orders_newest_first(self):
        store = _setup()
        first = _place(store, 1, (1, 1))
        _place(store, 4, (1, 1))
        second = _place(store, 1, (2, 1))

        orders = ListCustomerOrdersHandler(store.unit_of_work).handle(1, Role.CUSTOMER)
        assert [o.id for o in orders] == [second, first]

    def test_customer_listing_requires_customer_role(self):
        store = _setup()
        with pytest.raises(ForbiddenError):
            ListCustomerOrdersHandler(store.unit_of_work).handle(2, Role.SELLER)

    def test_seller_sees_orders_with_their_products(self):
        store = _setup()
        mixed = _place(store, 1, (1, 1), (2, 1))
        sencha_only = _place(store, 4, (1, 1))

        chai_orders = ListSellerOrdersHandler(store.unit_of_work).handle(3, Role.SELLER)
        sencha_orders = ListSellerOrdersHandler(store.unit_of_work).handle(2, Role.SELLER)

        assert [o.id for o in chai_orders] == [mixed]
        assert {o.id for o in sencha_orders} == {mixed, sencha_only}

    def test_seller_listing_requires_seller_role(self):
        store = _setup()
        with pytest.raises(ForbiddenError):
            ListSellerOrdersHandler(store.unit_of_work).handle(1, Role.CUSTOMER)
