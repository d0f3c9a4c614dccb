"""Domain service: Allocator.

Reserves specific units for a window, all or nothing:

  1. ensure the unit pool matches the product's declared quantity
  2. lock the active units and find the free ones
  3. if fewer than ``quantity`` are free, report what was seen and write nothing
  4. otherwise take the lowest free ordinals and write one reservation each

Step 4 only *adds* rows to the caller's unit of work.  The caller commits
(or rolls back) so several allocations can succeed or fail together, as
an order acceptance requires.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rentals.domain.exceptions import EntityNotFoundError, ValidationError
from rentals.domain.model.unit import Reservation
from rentals.domain.model.value_objects import RentalWindow
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability import AvailabilityIndex
from rentals.domain.service.unit_pool import UnitPoolService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of one allocation attempt.

    ``ok`` results carry the granted unit IDs; failures carry the
    ``available``/``total`` observed under the lock.
    """

    ok: bool
    unit_ids: tuple[int, ...] = ()
    available: int = 0
    total: int = 0

    @staticmethod
    def granted(unit_ids: list[int], available: int, total: int) -> AllocationResult:
        return AllocationResult(
            ok=True, unit_ids=tuple(unit_ids), available=available, total=total,
        )

    @staticmethod
    def insufficient(available: int, total: int) -> AllocationResult:
        return AllocationResult(ok=False, available=available, total=total)


class Allocator:

    def __init__(
        self,
        unit_pool: UnitPoolService | None = None,
        availability: AvailabilityIndex | None = None,
    ) -> None:
        self._unit_pool = unit_pool or UnitPoolService()
        self._availability = availability or AvailabilityIndex()

    def allocate(
        self,
        uow: UnitOfWork,
        product_id: str,
        window: RentalWindow,
        quantity: int,
        *,
        order_id: int | None = None,
    ) -> AllocationResult:
        if quantity < 1:
            raise ValidationError("Allocation quantity must be positive")

        product = uow.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        self._unit_pool.ensure_units(uow, product)

        active = uow.units.list_for_product(product_id, active_only=True, lock=True)
        total = len(active)
        if total == 0:
            logger.info(
                "Product %s has no active units, nothing to allocate", product_id,
                extra={"product_id": product_id, "order_id": order_id},
            )
            return AllocationResult.insufficient(available=0, total=0)

        free = self._availability.free_units(uow, product_id, window, lock=True)
        if len(free) < quantity:
            logger.info(
                "Cannot allocate %d of product %s for %s (available=%d total=%d)",
                quantity, product_id, window, len(free), total,
                extra={"product_id": product_id, "order_id": order_id},
            )
            return AllocationResult.insufficient(available=len(free), total=total)

        chosen = free[:quantity]
        for unit in chosen:
            uow.reservations.add(
                Reservation(
                    id=None,
                    product_id=product_id,
                    unit_id=unit.id,  # type: ignore[arg-type]
                    window=window,
                    order_id=order_id,
                )
            )

        unit_ids = [unit.id for unit in chosen]
        logger.info(
            "Allocated units %s of product %s for %s",
            [unit.ordinal for unit in chosen], product_id, window,
            extra={"product_id": product_id, "order_id": order_id},
        )
        return AllocationResult.granted(unit_ids, len(free), total)  # type: ignore[arg-type]
