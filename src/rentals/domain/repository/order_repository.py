"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.order import Order, OrderStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int, *, lock: bool = False) -> Order | None:
        """Return an order by its ID, or None if not found.

        With ``lock=True`` the order row is held until the transaction ends,
        so concurrent resolutions of the same order serialise.
        """

    @abstractmethod
    def list_by_status(self, status: OrderStatus | None = None) -> list[Order]:
        """Return orders (optionally filtered by status), newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order; assigns the ID of a new one."""
