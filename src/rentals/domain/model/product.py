"""Product aggregate.

A product is a rentable item type.  Its declared ``quantity`` is the number
of interchangeable physical units on hand; the unit pool mirrors it.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import Money


@dataclass
class Product:
    """A rentable product in the catalog.

    Changing ``quantity`` only updates the declaration; the caller must
    re-sync the unit pool in the same transaction.
    """

    id: str
    name: str
    price_per_day: Money
    quantity: int = 0
    category: str = ""
    description: str = ""
    is_active: bool = True

    def __post_init__(self) -> None:
        self.quantity = max(0, self.quantity)

    def update_price(self, new_price: Money) -> None:
        """Change the daily price.

        Existing orders keep the price captured when they were created.
        """
        if new_price.amount <= 0:
            raise ValidationError("Daily price must be greater than zero")
        self.price_per_day = new_price

    def update_quantity(self, quantity: int) -> int:
        """Set the declared unit count; negative values are clamped to 0."""
        self.quantity = max(0, quantity)
        return self.quantity

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        self.name = name.strip()
