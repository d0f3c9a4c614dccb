"""Domain service: Interval Availability Index.

Answers "which units of this product are free over this window?" and
"how busy is this product right now?".  Only active units count.  A unit
is free iff none of its reservations overlaps the half-open window.

These are reads.  They run inside the caller's unit of work so an
allocation sees exactly the reservations it is about to compete with.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rentals.domain.model.unit import Unit
from rentals.domain.model.value_objects import RentalWindow, as_utc
from rentals.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class Capacity:
    available: int
    total: int


@dataclass(frozen=True)
class Occupancy:
    """Busy units at one instant plus the earliest release among them."""

    busy_now: int
    total: int
    next_free_at: datetime | None = None

    @property
    def is_out_of_stock(self) -> bool:
        """No active units at all (as opposed to all of them being busy)."""
        return self.total == 0

    @property
    def available_now(self) -> int:
        return self.total - self.busy_now


class AvailabilityIndex:

    def free_units(
        self,
        uow: UnitOfWork,
        product_id: str,
        window: RentalWindow,
        *,
        lock: bool = False,
    ) -> list[Unit]:
        """Active units with no overlapping reservation, by ascending ordinal.

        With ``lock=True`` the product's active unit rows are locked first,
        so a concurrent allocation for the same product waits until this
        transaction finishes and then sees its reservations.
        """
        active = uow.units.list_for_product(product_id, active_only=True, lock=lock)
        if not active:
            return []
        busy = {r.unit_id for r in uow.reservations.list_overlapping(product_id, window)}
        return [unit for unit in active if unit.id not in busy]

    def free_unit_ids(self, uow: UnitOfWork, product_id: str, window: RentalWindow) -> frozenset[int]:
        return frozenset(unit.id for unit in self.free_units(uow, product_id, window))

    def capacity(self, uow: UnitOfWork, product_id: str, window: RentalWindow) -> Capacity:
        active = uow.units.list_for_product(product_id, active_only=True)
        if not active:
            return Capacity(available=0, total=0)
        busy = {r.unit_id for r in uow.reservations.list_overlapping(product_id, window)}
        free = sum(1 for unit in active if unit.id not in busy)
        return Capacity(available=free, total=len(active))

    def occupancy(self, uow: UnitOfWork, product_id: str, now: datetime) -> Occupancy:
        now = as_utc(now)
        active_ids = {u.id for u in uow.units.list_for_product(product_id, active_only=True)}
        if not active_ids:
            return Occupancy(busy_now=0, total=0)

        current = [
            r for r in uow.reservations.list_covering(product_id, now)
            if r.unit_id in active_ids
        ]
        if not current:
            return Occupancy(busy_now=0, total=len(active_ids))

        return Occupancy(
            busy_now=len({r.unit_id for r in current}),
            total=len(active_ids),
            next_free_at=min(r.window.end for r in current),
        )
