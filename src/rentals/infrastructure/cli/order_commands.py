"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from rentals.application.create_order import CreateOrderHandler
from rentals.application.dto import CustomerSpec, OrderDTO, OrderLineSpec
from rentals.application.resolve_order import ResolveOrderHandler, ResolveOrderResult, ResolveOutcome
from rentals.application.show_order import ListOrdersHandler, ShowOrderHandler
from rentals.domain.exceptions import DomainException
from rentals.domain.model.order import OrderAction, OrderStatus
from rentals.infrastructure.bootstrap import confirmation_channel, unit_of_work
from rentals.infrastructure.notifications.telegram_channel import parse_callback_data


def _parse_items(raw: str) -> list[OrderLineSpec]:
    """Parse '1:2@2025-01-10T10:00/2025-01-12T10:00,...' into OrderLineSpec list."""
    specs: list[OrderLineSpec] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        head, at, period = chunk.partition("@")
        start_raw, slash, end_raw = period.partition("/")
        if not at or not slash or ":" not in head:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'ProductId:Qty@Start/End'."
            )
        product_id, qty_str = head.rsplit(":", 1)
        try:
            qty = int(qty_str)
            start = datetime.fromisoformat(start_raw.strip())
            end = datetime.fromisoformat(end_raw.strip())
        except ValueError:
            raise click.BadParameter(f"Invalid quantity or dates in '{chunk}'.")
        specs.append(
            OrderLineSpec(product_id=product_id.strip(), start=start, end=end, quantity=qty)
        )
    return specs


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}, {dto.customer_phone}")
    if dto.customer_address:
        click.echo(f"Address:  {dto.customer_address}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>4} {'From':<21} {'To':<21} {'Days':>4} {'Total':>14}")
    click.echo(f"  {'-'*89}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<20} {line.quantity:>4} {line.start:<21} {line.end:<21} "
            f"{line.rental_days:>4} {line.line_total:>14}"
        )
    click.echo(f"  {'-'*89}")
    click.echo(f"  {'Order Total':<27} {dto.total:>62}")


def _report(result: ResolveOrderResult) -> None:
    if result.outcome is ResolveOutcome.ALREADY_PROCESSED:
        click.echo(f"Order #{result.order_id} was already processed ({result.status.value}).")
    elif result.outcome is ResolveOutcome.INSUFFICIENT_CAPACITY:
        raise click.ClickException(
            f"Cannot accept order #{result.order_id}: {result.shortfall}. Order is still pending."
        )
    elif result.outcome is ResolveOutcome.ACCEPTED:
        click.echo(f"Order #{result.order_id} accepted, {len(result.unit_ids)} unit(s) reserved.")
    else:
        click.echo(f"Order #{result.order_id} declined.")


def _resolve(order_id: int, action: OrderAction) -> None:
    handler = ResolveOrderHandler(uow=unit_of_work(), channel=confirmation_channel())

    try:
        result = handler.handle(order_id, action)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _report(result)


@click.command("create")
@click.option("--name", required=True, help="Customer name.")
@click.option("--phone", required=True, help="Customer phone.")
@click.option("--address", default="", help="Delivery address.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty@Start/End,...'.")
def order_create(name: str, phone: str, address: str, items: str) -> None:
    """Create a pending rental order and send it for confirmation."""
    specs = _parse_items(items)

    handler = CreateOrderHandler(uow=unit_of_work(), channel=confirmation_channel())

    try:
        result = handler.handle(CustomerSpec(name=name, phone=phone, address=address), specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.ok:
        raise click.ClickException(str(result.shortfall))

    order = result.order
    click.echo(f"Order #{order.id} created  (status={order.status.value}, total {order.total})")
    if not result.notified:
        click.echo("Warning: the operator could not be notified.")


@click.command("accept")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to accept.")
def order_accept(order_id: int) -> None:
    """Accept a pending order (reserves units)."""
    _resolve(order_id, OrderAction.ACCEPT)


@click.command("decline")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to decline.")
def order_decline(order_id: int) -> None:
    """Decline a pending order."""
    _resolve(order_id, OrderAction.DECLINE)


@click.command("callback")
@click.option("--data", required=True, help="Callback data, e.g. 'accept:42'.")
def order_callback(data: str) -> None:
    """Replay a confirmation-channel button press."""
    try:
        order_id, action = parse_callback_data(data)
    except DomainException as exc:
        raise click.BadParameter(str(exc))
    _resolve(order_id, action)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    default=None,
    help="Only orders in this status.",
)
def order_list(status: str | None) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(uow=unit_of_work())
    orders = handler.handle(OrderStatus(status.upper()) if status else None)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Status':<10} {'Customer':<24} {'Created':<22} {'Total':>14}")
    click.echo("-" * 80)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.status:<10} {dto.customer_name:<24} {dto.created_at:<22} {dto.total:>14}"
        )
