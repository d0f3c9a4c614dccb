"""Unit tests for the UnitPoolService domain service."""

from datetime import datetime, timezone

import pytest

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.model.unit import Reservation
from rentals.domain.model.value_objects import Money, RentalWindow
from rentals.domain.service.unit_pool import UnitPoolService
from tests.fakes import FakeUnitOfWork


def _setup(quantity: int = 0) -> tuple[FakeUnitOfWork, UnitPoolService]:
    product = Product(id="1", name="Godox SL-60W", price_per_day=Money.of("500"), quantity=quantity)
    return FakeUnitOfWork([product]), UnitPoolService()


def _active_ordinals(uow: FakeUnitOfWork, product_id: str = "1") -> list[int]:
    return [u.ordinal for u in uow.units.list_for_product(product_id, active_only=True)]


class TestSyncUnits:

    def test_creates_ordinals_one_to_n(self):
        uow, pool = _setup()
        active = pool.sync_units(uow, "1", 3)
        assert [u.ordinal for u in active] == [1, 2, 3]
        assert _active_ordinals(uow) == [1, 2, 3]

    def test_rerun_with_same_quantity_is_noop(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 3)
        writes_before = uow.units.writes
        pool.sync_units(uow, "1", 3)
        assert uow.units.writes == writes_before
        assert len(uow.units.list_for_product("1")) == 3
        assert _active_ordinals(uow) == [1, 2, 3]

    def test_shrinking_deactivates_high_ordinals(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 2)
        pool.sync_units(uow, "1", 1)
        assert _active_ordinals(uow) == [1]
        units = uow.units.list_for_product("1")
        assert [(u.ordinal, u.is_active) for u in units] == [(1, True), (2, False)]

    def test_growing_reactivates_existing_units(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 3)
        ids_before = [u.id for u in uow.units.list_for_product("1")]
        pool.sync_units(uow, "1", 1)
        pool.sync_units(uow, "1", 4)
        units = uow.units.list_for_product("1")
        assert [u.ordinal for u in units] == [1, 2, 3, 4]
        assert all(u.is_active for u in units)
        # Ordinals 1..3 keep their original rows
        assert [u.id for u in units][:3] == ids_before

    def test_zero_deactivates_everything(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 2)
        assert pool.sync_units(uow, "1", 0) == []
        assert _active_ordinals(uow) == []
        assert len(uow.units.list_for_product("1")) == 2

    def test_negative_quantity_clamped_to_zero(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 2)
        assert pool.sync_units(uow, "1", -5) == []
        assert _active_ordinals(uow) == []

    def test_unknown_product_rejected(self):
        uow, pool = _setup()
        with pytest.raises(EntityNotFoundError, match="not found"):
            pool.sync_units(uow, "404", 1)

    def test_deactivated_unit_keeps_reservations(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 2)
        unit2 = uow.units.list_for_product("1")[1]
        window = RentalWindow(datetime(2025, 1, 1, tzinfo=timezone.utc), datetime(2025, 1, 2, tzinfo=timezone.utc))
        uow.reservations.add(Reservation(id=None, product_id="1", unit_id=unit2.id, window=window))

        pool.sync_units(uow, "1", 1)

        history = uow.reservations.list_for_product("1")
        assert [r.unit_id for r in history] == [unit2.id]

    def test_locks_unit_rows(self):
        uow, pool = _setup()
        pool.sync_units(uow, "1", 1)
        assert uow.units.lock_requests == ["1"]


class TestEnsureUnits:

    def test_builds_missing_pool_from_declared_quantity(self):
        uow, pool = _setup(quantity=2)
        product = uow.products.get_by_id("1")
        active = pool.ensure_units(uow, product)
        assert [u.ordinal for u in active] == [1, 2]

    def test_consistent_pool_left_untouched(self):
        uow, pool = _setup(quantity=2)
        product = uow.products.get_by_id("1")
        pool.sync_units(uow, "1", 2)
        uow.units.lock_requests.clear()

        pool.ensure_units(uow, product)

        assert uow.units.lock_requests == []

    def test_repairs_drift(self):
        uow, pool = _setup(quantity=3)
        pool.sync_units(uow, "1", 1)
        product = uow.products.get_by_id("1")
        active = pool.ensure_units(uow, product)
        assert [u.ordinal for u in active] == [1, 2, 3]
