"""Abstract repository for Unit entities."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.unit import Unit


class UnitRepository(ABC):

    @abstractmethod
    def list_for_product(
        self,
        product_id: str,
        *,
        active_only: bool = False,
        lock: bool = False,
    ) -> list[Unit]:
        """Return the product's units ordered by ascending ordinal.

        With ``lock=True`` the returned rows stay exclusively locked until
        the surrounding transaction ends.
        """

    @abstractmethod
    def add(self, unit: Unit) -> None:
        """Persist a new unit and assign its ID."""

    @abstractmethod
    def save(self, unit: Unit) -> None:
        """Persist changes to an existing unit."""
