"""Abstract repository for Reservation entities."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from rentals.domain.model.unit import Reservation
from rentals.domain.model.value_objects import RentalWindow


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by ID, or None."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[Reservation]:
        """Return every reservation of the product, ordered by start time."""

    @abstractmethod
    def list_overlapping(self, product_id: str, window: RentalWindow) -> list[Reservation]:
        """Return the product's reservations whose window overlaps *window*."""

    @abstractmethod
    def list_covering(self, product_id: str, instant: datetime) -> list[Reservation]:
        """Return the product's reservations with ``start <= instant < end``."""

    @abstractmethod
    def add(self, reservation: Reservation) -> None:
        """Persist a new reservation and assign its ID."""

    @abstractmethod
    def delete(self, reservation_id: int) -> None:
        """Remove a reservation, freeing its unit for that window."""
