"""Human-readable order summaries for the confirmation channel."""

from __future__ import annotations

from rentals.application.dto import CapacityShortfall
from rentals.domain.model.order import Order, OrderStatus

_STATUS_FOOTER = {
    OrderStatus.PENDING: "Status: awaiting confirmation",
    OrderStatus.ACCEPTED: "Status: ACCEPTED, units reserved",
    OrderStatus.DECLINED: "Status: DECLINED",
}


def render_summary(order: Order, shortfall: CapacityShortfall | None = None) -> str:
    lines = [
        f"New rental order #{order.id}",
        "",
        f"Customer: {order.customer.name}",
        f"Phone: {order.customer.phone}",
    ]
    if order.customer.address:
        lines.append(f"Address: {order.customer.address}")

    lines += ["", "Equipment:"]
    for line in order.lines:
        lines.append(f"  - {line.product_name} x{line.quantity}")
        lines.append(f"    {line.window}")
        lines.append(
            f"    {line.window.rental_days} d x {line.price_per_day} x {line.quantity}"
            f" = {line.line_total}"
        )

    lines += [
        "",
        f"Lines: {len(order.lines)}",
        f"Total: {order.total}",
        "",
        _STATUS_FOOTER[order.status],
    ]
    if shortfall is not None:
        lines.append(f"Cannot accept: {shortfall}")
    return "\n".join(lines)
