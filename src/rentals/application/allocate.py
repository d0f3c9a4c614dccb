"""Application service: Allocate use case.

Direct allocation outside the order flow (e.g. an operator booking units
by hand).  One transaction: committed on success, rolled back otherwise.
"""

from __future__ import annotations

from datetime import datetime

from rentals.domain.model.value_objects import Quantity, RentalWindow
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.allocator import AllocationResult, Allocator


class AllocateHandler:

    def __init__(self, uow: UnitOfWork, allocator: Allocator | None = None) -> None:
        self._uow = uow
        self._allocator = allocator or Allocator()

    def handle(self, product_id: str, start: datetime, end: datetime, quantity: int) -> AllocationResult:
        window = RentalWindow(start, end)
        requested = Quantity(quantity)

        with self._uow as uow:
            result = self._allocator.allocate(uow, product_id, window, requested.value)
            if result.ok:
                uow.commit()
        return result
