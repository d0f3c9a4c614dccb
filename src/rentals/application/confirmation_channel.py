"""Port: the human-in-the-loop confirmation channel.

An order summary is sent to an operator together with the actions they
may take.  Their answer comes back asynchronously (possibly more than once)
and is fed to ``ResolveOrderHandler``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.order import OrderAction


class ConfirmationChannel(ABC):

    @abstractmethod
    def notify(self, order_id: int, summary: str, actions: list[OrderAction]) -> str:
        """Deliver *summary* with the given actions; return a delivery handle.

        Raises ConfirmationChannelError if the message could not be sent.
        """

    @abstractmethod
    def update_notification(
        self,
        handle: str,
        text: str,
        actions_remaining: list[OrderAction],
    ) -> None:
        """Replace the text (and remaining actions) of a delivered message."""
