"""Application service: Show Order / List Orders use cases (queries)."""

from __future__ import annotations

from rentals.application.dto import OrderDTO, OrderLineDTO, format_time
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.order import Order, OrderStatus
from rentals.domain.repository.unit_of_work import UnitOfWork


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_name=order.customer.name,
        customer_phone=order.customer.phone,
        customer_address=order.customer.address,
        status=order.status.value,
        lines=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                start=format_time(line.window.start),
                end=format_time(line.window.end),
                quantity=line.quantity.value,
                rental_days=line.window.rental_days,
                price_per_day=str(line.price_per_day),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=format_time(order.created_at),
        notification_handle=order.notification_handle,
    )


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, status: OrderStatus | None = None) -> list[OrderDTO]:
        with self._uow as uow:
            orders = uow.orders.list_by_status(status)
        return [order_to_dto(order) for order in orders]
