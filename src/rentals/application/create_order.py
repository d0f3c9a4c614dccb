"""Application service: Create Order use case.

Turns a cart into a PENDING order and hands it to the confirmation channel.

Steps:
  1. Validate every line (quantity, window) before touching the store.
  2. Resolve products, snapshot their daily price.
  3. Coalesce lines sharing (product, window) and capacity-check the summed
     demand inside one transaction.  No units are reserved yet.
  4. Persist the order as PENDING, then notify the confirmation channel.

A request that could never be honoured stops at step 3 and never reaches
an operator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rentals.application.confirmation_channel import ConfirmationChannel
from rentals.application.dto import CapacityShortfall, CustomerSpec, OrderLineSpec
from rentals.application.order_summary import render_summary
from rentals.domain.exceptions import (
    ConfirmationChannelError,
    EntityNotFoundError,
    ValidationError,
)
from rentals.domain.model.order import CustomerContact, Order, OrderAction, OrderLine
from rentals.domain.model.value_objects import Quantity, RentalWindow
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.availability import AvailabilityIndex
from rentals.domain.service.unit_pool import UnitPoolService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateOrderResult:
    """Either a persisted pending order or the first capacity shortfall."""

    order: Order | None
    shortfall: CapacityShortfall | None = None
    notified: bool = False

    @property
    def ok(self) -> bool:
        return self.order is not None


class CreateOrderHandler:

    def __init__(self, uow: UnitOfWork, channel: ConfirmationChannel) -> None:
        self._uow = uow
        self._channel = channel
        self._unit_pool = UnitPoolService()
        self._availability = AvailabilityIndex()

    def handle(self, customer: CustomerSpec, line_specs: list[OrderLineSpec]) -> CreateOrderResult:
        # Step 1: no store access until the request is well-formed
        checked = [
            (spec.product_id, RentalWindow(spec.start, spec.end), Quantity(spec.quantity))
            for spec in line_specs
        ]
        contact = CustomerContact(name=customer.name, phone=customer.phone, address=customer.address)

        with self._uow as uow:
            lines: list[OrderLine] = []
            for product_id, window, quantity in checked:
                product = uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                if not product.is_active:
                    raise ValidationError(f"Product '{product.name}' is not available for rent")
                lines.append(
                    OrderLine(
                        product_id=product.id,
                        product_name=product.name,
                        window=window,
                        quantity=quantity,
                        price_per_day=product.price_per_day,  # <-- price snapshot
                    )
                )

            order = Order.create(customer=contact, lines=lines)

            for demand in order.demands():
                product = uow.products.get_by_id(demand.product_id)
                self._unit_pool.ensure_units(uow, product)  # type: ignore[arg-type]
                capacity = self._availability.capacity(uow, demand.product_id, demand.window)
                if capacity.available < demand.quantity:
                    shortfall = CapacityShortfall(
                        product_id=demand.product_id,
                        product_name=demand.product_name,
                        requested=demand.quantity,
                        available=capacity.available,
                        total=capacity.total,
                    )
                    logger.info(
                        "Order rejected before confirmation: %s", shortfall,
                        extra={"product_id": demand.product_id},
                    )
                    return CreateOrderResult(order=None, shortfall=shortfall)

            uow.orders.save(order)
            uow.commit()

        logger.info(
            "Order #%s created for %s with %d line(s)",
            order.id, order.customer.name, len(order.lines),
            extra={"order_id": order.id},
        )
        return CreateOrderResult(order=order, notified=self._dispatch(order))

    def _dispatch(self, order: Order) -> bool:
        """Send the order to the operator and remember the delivery handle."""
        try:
            handle = self._channel.notify(
                order.id,  # type: ignore[arg-type]
                render_summary(order),
                [OrderAction.ACCEPT, OrderAction.DECLINE],
            )
        except ConfirmationChannelError:
            logger.exception(
                "Order #%s saved but the operator was not notified", order.id,
                extra={"order_id": order.id},
            )
            return False

        with self._uow as uow:
            stored = uow.orders.get_by_id(order.id)  # type: ignore[arg-type]
            if stored is not None:
                stored.attach_notification(handle)
                uow.orders.save(stored)
                uow.commit()
        order.attach_notification(handle)
        return True
