"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from rentals.application.add_product import AddProductHandler
from rentals.application.update_product import UpdateProductHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import unit_of_work
from rentals.infrastructure.settings import get_settings


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Daily price (e.g. 1500.00).")
@click.option("--quantity", default=0, show_default=True, type=int, help="Number of physical units.")
@click.option("--category", default="", help="Catalog category.")
@click.option("--description", default="", help="Free-form description.")
def product_add(name: str, price: str, quantity: int, category: str, description: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work(), currency=get_settings().currency)

    try:
        product = handler.handle(
            name=name,
            price_per_day=price,
            quantity=quantity,
            category=category,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price_per_day}/day "
        f"with {product.quantity} unit(s)"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    with unit_of_work() as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Category':<12} {'Qty':>5} {'Price/day':>14} {'Active':>7}")
    click.echo("-" * 73)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.name:<24} {p.category:<12} {p.quantity:>5} "
            f"{str(p.price_per_day):>14} {'yes' if p.is_active else 'no':>7}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New daily price.")
@click.option("--quantity", default=None, type=int, help="New number of physical units.")
@click.option("--category", default=None, help="New category.")
@click.option("--active/--inactive", "is_active", default=None, help="Offer or withdraw the product.")
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    quantity: int | None,
    category: str | None,
    is_active: bool | None,
) -> None:
    """Update a product (a quantity change re-syncs its units)."""
    handler = UpdateProductHandler(uow=unit_of_work())

    try:
        product = handler.handle(
            product_id,
            name=name,
            price_per_day=price,
            quantity=quantity,
            category=category,
            is_active=is_active,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} updated: {product.name}, {product.price_per_day}/day, "
        f"{product.quantity} unit(s)"
    )
