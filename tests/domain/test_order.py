"""Unit tests for the Order aggregate and line coalescing."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from rentals.domain.exceptions import OrderAlreadyProcessedError, ValidationError
from rentals.domain.model.order import (
    MAX_ORDER_LINES,
    CustomerContact,
    Order,
    OrderLine,
    OrderStatus,
    coalesce_lines,
)
from rentals.domain.model.value_objects import Money, Quantity, RentalWindow

W1 = RentalWindow(datetime(2025, 1, 10, 10, tzinfo=timezone.utc), datetime(2025, 1, 12, 10, tzinfo=timezone.utc))
W2 = RentalWindow(datetime(2025, 1, 20, tzinfo=timezone.utc), datetime(2025, 1, 21, tzinfo=timezone.utc))

CUSTOMER = CustomerContact(name="Aida", phone="+996 555 000 111", address="Bishkek")


def _line(product_id: str = "1", qty: int = 1, window: RentalWindow = W1, price: str = "100") -> OrderLine:
    return OrderLine(
        product_id=product_id,
        product_name=f"Product {product_id}",
        window=window,
        quantity=Quantity(qty),
        price_per_day=Money.of(price),
    )


class TestOrderCreate:

    def test_new_order_is_pending(self):
        order = Order.create(CUSTOMER, [_line()])
        assert order.status == OrderStatus.PENDING
        assert order.id is None
        assert order.is_pending

    def test_customer_fields_are_trimmed(self):
        order = Order.create(CustomerContact(name="  Aida ", phone=" 123 "), [_line()])
        assert order.customer.name == "Aida"
        assert order.customer.phone == "123"

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            Order.create(CustomerContact(name=" ", phone="1"), [_line()])

    def test_missing_phone_rejected(self):
        with pytest.raises(ValidationError, match="phone is required"):
            Order.create(CustomerContact(name="Aida", phone=""), [_line()])

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError, match="at least one line"):
            Order.create(CUSTOMER, [])

    def test_too_many_lines_rejected(self):
        with pytest.raises(ValidationError, match="Maximum"):
            Order.create(CUSTOMER, [_line() for _ in range(MAX_ORDER_LINES + 1)])


class TestOrderTotals:

    def test_line_total_uses_rental_days_and_quantity(self):
        # 2 days x 100 x 3 units
        assert _line(qty=3).line_total == Money.of("600")

    def test_order_total(self):
        order = Order.create(CUSTOMER, [_line(qty=1), _line("2", qty=2, window=W2, price="50")])
        assert order.total.amount == Decimal("300")


class TestOrderTransitions:

    def test_accept(self):
        order = Order.create(CUSTOMER, [_line()])
        order.accept()
        assert order.status == OrderStatus.ACCEPTED

    def test_decline(self):
        order = Order.create(CUSTOMER, [_line()])
        order.decline()
        assert order.status == OrderStatus.DECLINED

    @pytest.mark.parametrize("first, second", [
        ("accept", "accept"),
        ("accept", "decline"),
        ("decline", "accept"),
        ("decline", "decline"),
    ])
    def test_terminal_states_reject_further_transitions(self, first, second):
        order = Order.create(CUSTOMER, [_line()])
        getattr(order, first)()
        with pytest.raises(OrderAlreadyProcessedError, match="already processed"):
            getattr(order, second)()


class TestCoalesceLines:

    def test_same_product_and_window_are_summed(self):
        demands = coalesce_lines([_line(qty=2), _line(qty=2)])
        assert len(demands) == 1
        assert demands[0].quantity == 4

    def test_different_windows_stay_separate(self):
        demands = coalesce_lines([_line(qty=2), _line(qty=1, window=W2)])
        assert [d.quantity for d in demands] == [2, 1]

    def test_different_products_stay_separate(self):
        demands = coalesce_lines([_line("1", 2), _line("2", 2), _line("1", 1)])
        assert [(d.product_id, d.quantity) for d in demands] == [("1", 3), ("2", 2)]

    def test_order_demands(self):
        order = Order.create(CUSTOMER, [_line(qty=2), _line(qty=2)])
        assert [d.quantity for d in order.demands()] == [4]
