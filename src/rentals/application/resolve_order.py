"""Application service: Resolve Order use case.

Handles the operator's answer from the confirmation channel.  The channel
may deliver the same answer more than once, so the handler is keyed on the
order's current status: anything but PENDING is reported as already
processed and left alone.

Accepting allocates every coalesced line inside the same transaction as the
status change.  If any line cannot be allocated the whole transaction is
rolled back and the order stays PENDING, so the operator can retry later
or decline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from rentals.application.confirmation_channel import ConfirmationChannel
from rentals.application.dto import CapacityShortfall
from rentals.application.order_summary import render_summary
from rentals.domain.exceptions import ConfirmationChannelError, EntityNotFoundError
from rentals.domain.model.order import Order, OrderAction, OrderStatus
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.allocator import Allocator

logger = logging.getLogger(__name__)


class ResolveOutcome(Enum):
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"


@dataclass(frozen=True)
class ResolveOrderResult:
    order_id: int
    outcome: ResolveOutcome
    status: OrderStatus
    shortfall: CapacityShortfall | None = None
    unit_ids: tuple[int, ...] = ()


class ResolveOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        channel: ConfirmationChannel,
        allocator: Allocator | None = None,
    ) -> None:
        self._uow = uow
        self._channel = channel
        self._allocator = allocator or Allocator()

    def handle(self, order_id: int, action: OrderAction) -> ResolveOrderResult:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id, lock=True)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            if not order.is_pending:
                logger.info(
                    "Ignoring %s for order #%s: already %s",
                    action.value, order_id, order.status.value,
                    extra={"order_id": order_id},
                )
                return ResolveOrderResult(
                    order_id=order_id,
                    outcome=ResolveOutcome.ALREADY_PROCESSED,
                    status=order.status,
                )

            if action is OrderAction.DECLINE:
                order.decline()
                uow.orders.save(order)
                uow.commit()
                result = ResolveOrderResult(
                    order_id=order_id, outcome=ResolveOutcome.DECLINED, status=order.status,
                )
            else:
                result = self._accept(uow, order)

        logger.info(
            "Order #%s resolved: %s", order_id, result.outcome.value,
            extra={"order_id": order_id},
        )
        self._report(order, result)
        return result

    def _accept(self, uow: UnitOfWork, order: Order) -> ResolveOrderResult:
        granted: list[int] = []
        for demand in order.demands():
            allocation = self._allocator.allocate(
                uow, demand.product_id, demand.window, demand.quantity, order_id=order.id,
            )
            if not allocation.ok:
                uow.rollback()
                shortfall = CapacityShortfall(
                    product_id=demand.product_id,
                    product_name=demand.product_name,
                    requested=demand.quantity,
                    available=allocation.available,
                    total=allocation.total,
                )
                logger.warning(
                    "Cannot accept order #%s: %s", order.id, shortfall,
                    extra={"order_id": order.id, "product_id": demand.product_id},
                )
                return ResolveOrderResult(
                    order_id=order.id,  # type: ignore[arg-type]
                    outcome=ResolveOutcome.INSUFFICIENT_CAPACITY,
                    status=OrderStatus.PENDING,
                    shortfall=shortfall,
                )
            granted.extend(allocation.unit_ids)

        order.accept()
        uow.orders.save(order)
        uow.commit()

        return ResolveOrderResult(
            order_id=order.id,  # type: ignore[arg-type]
            outcome=ResolveOutcome.ACCEPTED,
            status=order.status,
            unit_ids=tuple(granted),
        )

    def _report(self, order: Order, result: ResolveOrderResult) -> None:
        """Update the operator's message; the committed state stands either way."""
        if order.notification_handle is None:
            return
        if result.outcome is ResolveOutcome.INSUFFICIENT_CAPACITY:
            remaining = [OrderAction.ACCEPT, OrderAction.DECLINE]
        else:
            remaining = []
        try:
            self._channel.update_notification(
                order.notification_handle,
                render_summary(order, result.shortfall),
                remaining,
            )
        except ConfirmationChannelError:
            logger.exception(
                "Could not update the confirmation message for order #%s", order.id,
                extra={"order_id": order.id},
            )
