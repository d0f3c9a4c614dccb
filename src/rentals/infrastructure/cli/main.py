import click

from rentals.infrastructure.cli.inventory_commands import (
    availability_check,
    availability_occupancy,
    db_init,
    reservation_allocate,
    reservation_delete,
    reservation_list,
    units_sync,
)
from rentals.infrastructure.cli.order_commands import (
    order_accept,
    order_callback,
    order_create,
    order_decline,
    order_list,
    order_show,
)
from rentals.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from rentals.infrastructure.logging_config import setup_logging
from rentals.infrastructure.settings import get_settings


@click.group()
def cli() -> None:
    """Rentals: equipment reservation engine"""
    settings = get_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def units() -> None:
    """Manage unit pools."""


@cli.group()
def availability() -> None:
    """Query availability."""


@cli.group()
def reservation() -> None:
    """Manage committed reservations."""


@cli.group()
def order() -> None:
    """Manage rental orders."""


# Register subcommands
db.add_command(db_init)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
units.add_command(units_sync)
availability.add_command(availability_check)
availability.add_command(availability_occupancy)
reservation.add_command(reservation_allocate)
reservation.add_command(reservation_delete)
reservation.add_command(reservation_list)
order.add_command(order_accept)
order.add_command(order_callback)
order.add_command(order_create)
order.add_command(order_decline)
order.add_command(order_list)
order.add_command(order_show)
