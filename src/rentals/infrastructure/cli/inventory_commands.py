"""CLI commands for unit pools, availability and reservations."""

from __future__ import annotations

from datetime import datetime

import click

from rentals.application.allocate import AllocateHandler
from rentals.application.availability_queries import GetAvailabilityHandler, GetOccupancyHandler
from rentals.application.dto import format_time
from rentals.application.reservation_admin import DeleteReservationHandler, ListReservationsHandler
from rentals.application.sync_units import SyncUnitsHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import engine, unit_of_work
from rentals.infrastructure.persistence.sql_models import create_schema

DATETIME = click.DateTime(formats=["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"])


@click.command("init")
def db_init() -> None:
    """Create the database schema."""
    create_schema(engine())
    click.echo("Schema created.")


@click.command("sync")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Declared number of units.")
def units_sync(product_id: str, quantity: int) -> None:
    """Set a product's quantity and reconcile its units."""
    handler = SyncUnitsHandler(uow=unit_of_work())

    try:
        active = handler.handle(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    ordinals = ", ".join(f"#{u.ordinal}" for u in active) or "none"
    click.echo(f"Product #{product_id}: active units {ordinals}")


@click.command("check")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", required=True, type=DATETIME, help="Window start (UTC).")
@click.option("--end", required=True, type=DATETIME, help="Window end (UTC, exclusive).")
def availability_check(product_id: str, start: datetime, end: datetime) -> None:
    """Show how many units are free over a window."""
    handler = GetAvailabilityHandler(uow=unit_of_work())

    try:
        dto = handler.handle(product_id, start, end)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id}: {dto.available} of {dto.total} free")


@click.command("occupancy")
@click.option("--product", "product_id", required=True, help="Product ID.")
def availability_occupancy(product_id: str) -> None:
    """Show how many units are busy right now."""
    handler = GetOccupancyHandler(uow=unit_of_work())

    try:
        occupancy = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if occupancy.is_out_of_stock:
        click.echo(f"Product #{product_id}: out of stock")
        return
    click.echo(f"Product #{product_id}: {occupancy.busy_now} of {occupancy.total} busy now")
    if occupancy.next_free_at is not None:
        click.echo(f"Next unit free at {format_time(occupancy.next_free_at)}")


@click.command("allocate")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--start", required=True, type=DATETIME, help="Window start (UTC).")
@click.option("--end", required=True, type=DATETIME, help="Window end (UTC, exclusive).")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to reserve.")
def reservation_allocate(product_id: str, start: datetime, end: datetime, quantity: int) -> None:
    """Reserve units directly, bypassing the order flow."""
    handler = AllocateHandler(uow=unit_of_work())

    try:
        result = handler.handle(product_id, start, end, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.ok:
        raise click.ClickException(
            f"Not enough free units ({result.available} of {result.total} free)"
        )
    click.echo(f"Reserved unit IDs {', '.join(str(u) for u in result.unit_ids)}")


@click.command("list")
@click.option("--product", "product_id", required=True, help="Product ID.")
def reservation_list(product_id: str) -> None:
    """List a product's reservations (including retired units)."""
    handler = ListReservationsHandler(uow=unit_of_work())

    try:
        reservations = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not reservations:
        click.echo("No reservations found.")
        return

    click.echo(f"{'ID':<6} {'Unit':<8} {'Start':<22} {'End':<22} {'Order':>6}")
    click.echo("-" * 68)
    for r in reservations:
        unit = f"#{r.unit_ordinal}" + ("" if r.unit_active else "*")
        order = str(r.order_id) if r.order_id is not None else "-"
        click.echo(f"{r.id:<6} {unit:<8} {r.start:<22} {r.end:<22} {order:>6}")


@click.command("delete")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def reservation_delete(reservation_id: int) -> None:
    """Delete a reservation (frees the unit for that window)."""
    handler = DeleteReservationHandler(uow=unit_of_work())

    try:
        handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{reservation_id} deleted.")
