"""Unit and Reservation entities.

A Unit is one physical instance of a product.  Units are never deleted:
shrinking a product's quantity only deactivates the surplus ordinals so
past reservations keep pointing at a real row.

A Reservation is a committed claim on exactly one unit for a half-open
window.  Reservations are created by the allocator and never updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from rentals.domain.model.value_objects import RentalWindow


@dataclass
class Unit:
    id: int | None
    product_id: str
    ordinal: int
    is_active: bool = True

    def activate(self) -> bool:
        """Mark the unit allocatable.  Returns True if anything changed."""
        if self.is_active:
            return False
        self.is_active = True
        return True

    def deactivate(self) -> bool:
        if not self.is_active:
            return False
        self.is_active = False
        return True


@dataclass
class Reservation:
    id: int | None
    product_id: str
    unit_id: int
    window: RentalWindow
    order_id: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def conflicts_with(self, other: Reservation) -> bool:
        """Two reservations conflict when they hold the same unit at the same time."""
        return self.unit_id == other.unit_id and self.window.overlaps(other.window)
