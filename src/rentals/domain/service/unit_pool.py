"""Domain service: Unit Pool.

Keeps each product's set of numbered units in step with its declared
quantity.  For quantity N the active units are exactly ordinals 1..N;
higher ordinals left over from a larger quantity are deactivated, never
deleted, so their reservation history stays intact.
"""

from __future__ import annotations

import logging

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.model.unit import Unit
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UnitPoolService:

    def sync_units(self, uow: UnitOfWork, product_id: str, quantity: int) -> list[Unit]:
        """Make ordinals ``1..quantity`` exactly the active units of the product.

        Idempotent: a repeated call with the same quantity writes nothing.
        Returns the active units ordered by ordinal.
        """
        if uow.products.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        quantity = max(0, quantity)
        units = uow.units.list_for_product(product_id, lock=True)
        by_ordinal = {unit.ordinal: unit for unit in units}

        created = activated = deactivated = 0
        for ordinal in range(1, quantity + 1):
            unit = by_ordinal.get(ordinal)
            if unit is None:
                unit = Unit(id=None, product_id=product_id, ordinal=ordinal)
                uow.units.add(unit)
                by_ordinal[ordinal] = unit
                created += 1
            elif unit.activate():
                uow.units.save(unit)
                activated += 1

        for unit in units:
            if unit.ordinal > quantity and unit.deactivate():
                uow.units.save(unit)
                deactivated += 1

        if created or activated or deactivated:
            logger.info(
                "Unit pool for product %s synced to %d (created=%d activated=%d deactivated=%d)",
                product_id, quantity, created, activated, deactivated,
            )

        return [by_ordinal[ordinal] for ordinal in range(1, quantity + 1)]

    def ensure_units(self, uow: UnitOfWork, product: Product) -> list[Unit]:
        """Read-repair: re-sync the pool if it drifted from ``product.quantity``.

        Covers products that predate the per-unit model (no units yet) and
        any pool whose active ordinals are not exactly 1..quantity.
        """
        active = uow.units.list_for_product(product.id, active_only=True)
        expected = list(range(1, product.quantity + 1))
        if [unit.ordinal for unit in active] == expected:
            return active

        logger.warning(
            "Unit pool for product %s out of step with quantity %d, re-syncing",
            product.id, product.quantity,
        )
        return self.sync_units(uow, product.id, product.quantity)
