"""Application service: Sync Units use case.

Sets a product's declared quantity and reconciles its unit pool in one
transaction.  Negative quantities are clamped to zero.
"""

from __future__ import annotations

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.unit import Unit
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.unit_pool import UnitPoolService


class SyncUnitsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._unit_pool = UnitPoolService()

    def handle(self, product_id: str, quantity: int) -> list[Unit]:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            product.update_quantity(quantity)
            uow.products.save(product)
            active = self._unit_pool.sync_units(uow, product_id, product.quantity)
            uow.commit()
        return active
