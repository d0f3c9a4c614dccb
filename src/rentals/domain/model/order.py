"""Order aggregate: a customer's rental request awaiting an operator.

An order never claims units by itself.  It is created ``PENDING`` after a
read-only capacity check, and only when an operator accepts it does the
allocator write reservations.  Accept and decline are both terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rentals.domain.exceptions import OrderAlreadyProcessedError, ValidationError
from rentals.domain.model.value_objects import Money, Quantity, RentalWindow


class OrderStatus(Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class OrderAction(Enum):
    """Responses an operator can give through the confirmation channel."""

    ACCEPT = "accept"
    DECLINE = "decline"


@dataclass(frozen=True)
class CustomerContact:
    name: str
    phone: str
    address: str = ""


@dataclass
class OrderLine:
    """One requested product/window/quantity.

    ``price_per_day`` is a snapshot taken when the order is created.
    """

    product_id: str
    product_name: str
    window: RentalWindow
    quantity: Quantity
    price_per_day: Money

    @property
    def line_total(self) -> Money:
        return self.price_per_day * (self.window.rental_days * self.quantity.value)


@dataclass(frozen=True)
class Demand:
    """Total quantity requested for one product over one exact window."""

    product_id: str
    product_name: str
    window: RentalWindow
    quantity: int


def coalesce_lines(lines: list[OrderLine]) -> list[Demand]:
    """Sum quantities of lines sharing ``(product_id, window)``.

    Capacity must be checked against the summed demand: two lines of 2 for
    the same product and window need 4 free units, not 2.  First-seen order
    is preserved.
    """
    totals: dict[tuple[str, RentalWindow], int] = {}
    names: dict[tuple[str, RentalWindow], str] = {}
    for line in lines:
        key = (line.product_id, line.window)
        totals[key] = totals.get(key, 0) + line.quantity.value
        names.setdefault(key, line.product_name)
    return [
        Demand(product_id=pid, product_name=names[(pid, window)], window=window, quantity=qty)
        for (pid, window), qty in totals.items()
    ]


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ORDER_LINES = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for rental orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer: CustomerContact
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    notification_handle: str | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(customer: CustomerContact, lines: list[OrderLine]) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not customer.name or not customer.name.strip():
            raise ValidationError("Customer name is required")
        if not customer.phone or not customer.phone.strip():
            raise ValidationError("Customer phone is required")

        if not lines:
            raise ValidationError("Order must contain at least one line")
        if len(lines) > MAX_ORDER_LINES:
            raise ValidationError(f"Maximum {MAX_ORDER_LINES} lines per order")

        contact = CustomerContact(
            name=customer.name.strip(),
            phone=customer.phone.strip(),
            address=(customer.address or "").strip(),
        )
        return Order(id=None, customer=contact, lines=list(lines))

    # --- State transitions ----------------------------------------------------

    def accept(self) -> None:
        """Transition PENDING -> ACCEPTED.

        Units must already be allocated in the same transaction.
        """
        self._assert_pending()
        self.status = OrderStatus.ACCEPTED
        self.updated_at = _now()

    def decline(self) -> None:
        """Transition PENDING -> DECLINED.  Never touches units."""
        self._assert_pending()
        self.status = OrderStatus.DECLINED
        self.updated_at = _now()

    def attach_notification(self, handle: str) -> None:
        self.notification_handle = handle

    # --- Computed properties --------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def total(self) -> Money:
        if not self.lines:
            return Money.zero()
        result = Money.zero(self.lines[0].price_per_day.currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    def demands(self) -> list[Demand]:
        return coalesce_lines(self.lines)

    # --- Internal helpers -----------------------------------------------------

    def _assert_pending(self) -> None:
        if self.status != OrderStatus.PENDING:
            raise OrderAlreadyProcessedError(
                f"Order #{self.id} already processed (status {self.status.value})"
            )
