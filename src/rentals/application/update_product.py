"""Application service: Update Product use case.

A quantity change re-syncs the unit pool inside the same transaction, so
the declared count and the active units never disagree once committed.
"""

from __future__ import annotations

from rentals.domain.exceptions import EntityNotFoundError, ValidationError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.unit_pool import UnitPoolService


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow
        self._unit_pool = UnitPoolService()

    def handle(
        self,
        product_id: str,
        *,
        name: str | None = None,
        price_per_day: str | None = None,
        quantity: int | None = None,
        category: str | None = None,
        description: str | None = None,
        is_active: bool | None = None,
    ) -> Product:
        """Apply the given changes; fields left as None are untouched.

        Existing orders keep the price captured at creation time.
        """
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            if name is not None and name.strip() != product.name:
                other = uow.products.get_by_name(name.strip())
                if other is not None and other.id != product.id:
                    raise ValidationError(f"Product '{name.strip()}' already exists")
                product.rename(name)
            if price_per_day is not None:
                product.update_price(Money.of(price_per_day, product.price_per_day.currency))
            if category is not None:
                product.category = category.strip()
            if description is not None:
                product.description = description.strip()
            if is_active is not None:
                product.is_active = is_active

            quantity_changed = quantity is not None and max(0, quantity) != product.quantity
            if quantity is not None:
                product.update_quantity(quantity)

            uow.products.save(product)
            if quantity_changed:
                self._unit_pool.sync_units(uow, product.id, product.quantity)
            uow.commit()

        return product
