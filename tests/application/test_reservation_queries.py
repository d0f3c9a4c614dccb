"""Tests for the availability views and reservation administration."""

from datetime import datetime, timezone

import pytest

from rentals.application.allocate import AllocateHandler
from rentals.application.availability_queries import GetAvailabilityHandler, GetOccupancyHandler
from rentals.application.reservation_admin import DeleteReservationHandler, ListReservationsHandler
from rentals.application.update_product import UpdateProductHandler
from rentals.domain.exceptions import EntityNotFoundError, ValidationError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork

JAN_10 = datetime(2025, 1, 10, 10, tzinfo=timezone.utc)
JAN_11 = datetime(2025, 1, 11, tzinfo=timezone.utc)
JAN_12 = datetime(2025, 1, 12, 10, tzinfo=timezone.utc)


def _uow(quantity: int = 2) -> FakeUnitOfWork:
    return FakeUnitOfWork([
        Product(id="1", name="Camera", price_per_day=Money.of("1000"), quantity=quantity),
    ])


class TestAllocateHandler:

    def test_commits_on_success(self):
        uow = _uow()
        result = AllocateHandler(uow).handle("1", JAN_10, JAN_12, 2)

        assert result.ok
        assert uow.commits == 1
        assert len(uow.reservations.all()) == 2

    def test_failure_leaves_store_untouched(self):
        uow = _uow()
        AllocateHandler(uow).handle("1", JAN_10, JAN_12, 2)

        result = AllocateHandler(uow).handle("1", JAN_11, JAN_12, 1)

        assert not result.ok
        assert uow.commits == 1
        assert len(uow.reservations.all()) == 2

    def test_rejects_bad_quantity(self):
        with pytest.raises(ValidationError):
            AllocateHandler(_uow()).handle("1", JAN_10, JAN_12, 0)


class TestAvailabilityViews:

    def test_free_set_and_counts(self):
        uow = _uow(quantity=3)
        AllocateHandler(uow).handle("1", JAN_10, JAN_12, 1)

        view = GetAvailabilityHandler(uow).handle("1", JAN_11, JAN_12)

        assert (view.available, view.total) == (2, 3)
        assert len(view.free_unit_ids) == 2

    def test_occupancy_now(self):
        uow = _uow()
        AllocateHandler(uow).handle("1", JAN_10, JAN_12, 1)

        occupancy = GetOccupancyHandler(uow).handle("1", now=JAN_11)

        assert occupancy.busy_now == 1
        assert occupancy.total == 2
        assert occupancy.next_free_at == JAN_12

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            GetAvailabilityHandler(_uow()).handle("9", JAN_10, JAN_12)
        with pytest.raises(EntityNotFoundError):
            GetOccupancyHandler(_uow()).handle("9")


class TestReservationAdmin:

    def test_lists_reservations_of_retired_units(self):
        uow = _uow()
        AllocateHandler(uow).handle("1", JAN_10, JAN_12, 2)
        UpdateProductHandler(uow).handle("1", quantity=1)

        listed = ListReservationsHandler(uow).handle("1")

        assert [(r.unit_ordinal, r.unit_active) for r in listed] == [(1, True), (2, False)]
        assert listed[0].start == "2025-01-10 10:00 UTC"

    def test_delete_frees_unit(self):
        uow = _uow(quantity=1)
        AllocateHandler(uow).handle("1", JAN_10, JAN_12, 1)
        reservation_id = uow.reservations.all()[0].id

        DeleteReservationHandler(uow).handle(reservation_id)

        assert uow.reservations.all() == []
        assert GetAvailabilityHandler(uow).handle("1", JAN_10, JAN_12).available == 1

    def test_delete_unknown_reservation(self):
        with pytest.raises(EntityNotFoundError, match="Reservation #5 not found"):
            DeleteReservationHandler(_uow()).handle(5)
