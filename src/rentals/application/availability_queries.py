"""Application service: availability read views (queries).

Consumed by the storefront ("3 of 5 free for these dates", "free again at
18:00") and the admin UI.  Nothing here writes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.value_objects import RentalWindow
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability import AvailabilityIndex, Occupancy


@dataclass(frozen=True)
class AvailabilityDTO:
    product_id: str
    free_unit_ids: frozenset[int]
    available: int
    total: int


class GetAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._availability = AvailabilityIndex()

    def handle(self, product_id: str, start: datetime, end: datetime) -> AvailabilityDTO:
        window = RentalWindow(start, end)
        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            total = len(uow.units.list_for_product(product_id, active_only=True))
            free = self._availability.free_unit_ids(uow, product_id, window)
        return AvailabilityDTO(
            product_id=product_id, free_unit_ids=free, available=len(free), total=total,
        )


class GetOccupancyHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._availability = AvailabilityIndex()

    def handle(self, product_id: str, now: datetime | None = None) -> Occupancy:
        now = now or datetime.now(timezone.utc)
        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            return self._availability.occupancy(uow, product_id, now)
