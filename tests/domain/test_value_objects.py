"""Unit tests for domain value objects."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import Money, Quantity, RentalWindow


def _at(day: int, hour: int = 0) -> datetime:
    return datetime(2025, 1, day, hour, tzinfo=timezone.utc)


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_of_factory_from_string(self):
        m = Money.of("1500.50")
        assert m.amount == Decimal("1500.50")
        assert m.currency == "KGS"

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_invalid_amount_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_multiplication_by_int(self):
        assert Money.of("100") * 3 == Money.of("300")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("1", "KGS") + Money.of("1", "USD")

    def test_str(self):
        assert str(Money.of("100")) == "100.00 KGS"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_positive(self):
        assert Quantity(3).value == 3

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(1.5)  # type: ignore[arg-type]

    def test_addition(self):
        assert Quantity(2) + Quantity(2) == Quantity(4)


# ── RentalWindow ─────────────────────────────────────────────────────────────


class TestRentalWindow:

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="must end after it starts"):
            RentalWindow(_at(12), _at(10))

    def test_empty_window_rejected(self):
        with pytest.raises(ValidationError, match="must end after it starts"):
            RentalWindow(_at(10), _at(10))

    def test_naive_datetimes_are_utc(self):
        window = RentalWindow(datetime(2025, 1, 10, 10), datetime(2025, 1, 12, 10))
        assert window.start == _at(10, 10)
        assert window.start.tzinfo is not None

    def test_other_timezones_normalised(self):
        bishkek = timezone(timedelta(hours=6))
        window = RentalWindow(
            datetime(2025, 1, 10, 16, tzinfo=bishkek),
            datetime(2025, 1, 12, 16, tzinfo=bishkek),
        )
        assert window == RentalWindow(_at(10, 10), _at(12, 10))

    def test_overlapping_windows(self):
        w1 = RentalWindow(_at(10, 10), _at(12, 10))
        w2 = RentalWindow(_at(11), _at(11, 12))
        assert w1.overlaps(w2)
        assert w2.overlaps(w1)

    def test_back_to_back_windows_do_not_overlap(self):
        w1 = RentalWindow(_at(10, 10), _at(12, 10))
        w3 = RentalWindow(_at(12, 10), _at(13, 10))
        assert not w1.overlaps(w3)
        assert not w3.overlaps(w1)

    def test_contains_is_half_open(self):
        window = RentalWindow(_at(10), _at(11))
        assert window.contains(_at(10))
        assert not window.contains(_at(11))

    @pytest.mark.parametrize(
        "start, end, days",
        [
            (_at(10, 10), _at(10, 12), 1),
            (_at(10, 10), _at(11, 10), 1),
            (_at(10, 10), _at(11, 11), 2),
            (_at(10, 10), _at(12, 10), 2),
        ],
    )
    def test_rental_days_counts_started_days(self, start, end, days):
        assert RentalWindow(start, end).rental_days == days

    def test_parse_iso(self):
        window = RentalWindow.parse("2025-01-10T10:00", "2025-01-12T10:00")
        assert window == RentalWindow(_at(10, 10), _at(12, 10))

    def test_parse_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid rental window"):
            RentalWindow.parse("soon", "later")
