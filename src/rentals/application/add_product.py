"""Application service: Add Product use case."""

from __future__ import annotations

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.unit_pool import UnitPoolService


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, currency: str = "KGS") -> None:
        self._uow = uow
        self._currency = currency
        self._unit_pool = UnitPoolService()

    def handle(
        self,
        name: str,
        price_per_day: str,
        quantity: int = 0,
        category: str = "",
        description: str = "",
    ) -> Product:
        """Add a new product to the catalog and create its units."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        price = Money.of(price_per_day, self._currency)
        if price.amount <= 0:
            raise ValidationError("Daily price must be greater than zero")

        with self._uow as uow:
            if uow.products.get_by_name(name.strip()) is not None:
                raise ValidationError(f"Product '{name.strip()}' already exists")

            # Auto-assign ID based on existing products
            all_products = uow.products.list_all()
            if all_products:
                next_id = str(max(int(p.id) for p in all_products) + 1)
            else:
                next_id = "1"

            product = Product(
                id=next_id,
                name=name.strip(),
                price_per_day=price,
                quantity=quantity,
                category=category.strip(),
                description=description.strip(),
            )
            uow.products.save(product)
            self._unit_pool.sync_units(uow, product.id, product.quantity)
            uow.commit()

        return product
