"""Transaction boundary over all repositories.

Every operation that reads availability and then writes reservations does
both through one UnitOfWork, inside one ``with`` block::

    with uow:
        result = allocator.allocate(uow, product_id, window, 2)
        if result.ok:
            uow.commit()

Leaving the block without ``commit()`` rolls everything back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.product_repository import ProductRepository
from rentals.domain.repository.reservation_repository import ReservationRepository
from rentals.domain.repository.unit_repository import UnitRepository


class UnitOfWork(ABC):

    products: ProductRepository
    units: UnitRepository
    reservations: ReservationRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since the block started durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change (no-op after commit)."""
