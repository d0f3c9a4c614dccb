"""Application service: reservation listing and manual correction."""

from __future__ import annotations

import logging

from rentals.application.dto import ReservationDTO, format_time
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ListReservationsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> list[ReservationDTO]:
        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            # Inactive units included: their history must stay visible
            units = {u.id: u for u in uow.units.list_for_product(product_id)}
            reservations = uow.reservations.list_for_product(product_id)

        return [
            ReservationDTO(
                id=r.id,  # type: ignore[arg-type]
                product_id=r.product_id,
                unit_id=r.unit_id,
                unit_ordinal=units[r.unit_id].ordinal,
                unit_active=units[r.unit_id].is_active,
                start=format_time(r.window.start),
                end=format_time(r.window.end),
                order_id=r.order_id,
            )
            for r in reservations
        ]


class DeleteReservationHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reservation_id: int) -> None:
        """Remove a reservation; its unit is free for that window immediately."""
        with self._uow as uow:
            reservation = uow.reservations.get_by_id(reservation_id)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation #{reservation_id} not found")
            uow.reservations.delete(reservation_id)
            uow.commit()

        logger.info(
            "Reservation #%s deleted (product %s, unit %s, %s)",
            reservation_id, reservation.product_id, reservation.unit_id, reservation.window,
            extra={"reservation_id": reservation_id, "product_id": reservation.product_id},
        )
