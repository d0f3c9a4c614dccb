"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI / callback adapters and the application
layer without exposing domain internals.  Inputs are normalised here once
(strict types, UTC windows) so the core never guesses at field shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CustomerSpec:
    """Input: contact details from the checkout form."""

    name: str
    phone: str
    address: str = ""


@dataclass(frozen=True)
class OrderLineSpec:
    """Input: one cart line (product, rental window, quantity)."""

    product_id: str
    start: datetime
    end: datetime
    quantity: int


@dataclass(frozen=True)
class CapacityShortfall:
    """Output: a product that cannot cover the requested quantity."""

    product_id: str
    product_name: str
    requested: int
    available: int
    total: int

    def __str__(self) -> str:
        if self.total == 0:
            return f"{self.product_name} is out of stock"
        return (
            f"Not enough {self.product_name} for the requested period "
            f"(need {self.requested}, {self.available} of {self.total} free)"
        )


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single order line as displayed to the user."""

    product_id: str
    product_name: str
    start: str
    end: str
    quantity: int
    rental_days: int
    price_per_day: str
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    customer_name: str
    customer_phone: str
    customer_address: str
    status: str
    lines: list[OrderLineDTO]
    total: str
    created_at: str
    notification_handle: str | None = None


@dataclass(frozen=True)
class ReservationDTO:
    id: int
    product_id: str
    unit_id: int
    unit_ordinal: int
    unit_active: bool
    start: str
    end: str
    order_id: int | None


_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


def format_time(value: datetime) -> str:
    return value.strftime(_TIME_FORMAT)
