"""Confirmation channel that only writes to the log.

Used when no bot is configured (local runs, the CLI); operators resolve
orders with ``rentals order accept/decline`` instead of buttons.
"""

from __future__ import annotations

import logging

from rentals.application.confirmation_channel import ConfirmationChannel
from rentals.domain.model.order import OrderAction

logger = logging.getLogger(__name__)


class LoggingConfirmationChannel(ConfirmationChannel):

    def notify(self, order_id: int, summary: str, actions: list[OrderAction]) -> str:
        logger.info(
            "Order #%s awaiting confirmation (actions: %s)\n%s",
            order_id, ", ".join(a.value for a in actions), summary,
        )
        return f"log:{order_id}"

    def update_notification(
        self,
        handle: str,
        text: str,
        actions_remaining: list[OrderAction],
    ) -> None:
        logger.info("Confirmation message %s updated\n%s", handle, text)
