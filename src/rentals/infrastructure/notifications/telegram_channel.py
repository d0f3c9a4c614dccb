"""Telegram Bot API adapter for the confirmation channel.

Each pending order becomes a chat message with inline "Accept" / "Decline"
buttons.  The delivery handle is ``"<chat_id>:<message_id>:<order_id>"``.
Pressing a button makes Telegram deliver a callback query whose
``data`` is ``"<action>:<order_id>"``; the webhook side passes it through
``parse_callback_data`` and on to ``ResolveOrderHandler``.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from rentals.application.confirmation_channel import ConfirmationChannel
from rentals.domain.exceptions import ConfirmationChannelError, ValidationError
from rentals.domain.model.order import OrderAction

logger = logging.getLogger(__name__)

_BUTTON_LABELS = {
    OrderAction.ACCEPT: "Accept",
    OrderAction.DECLINE: "Decline",
}


def callback_data(order_id: int, action: OrderAction) -> str:
    return f"{action.value}:{order_id}"


def parse_callback_data(data: str) -> tuple[int, OrderAction]:
    """Turn ``"accept:42"`` into ``(42, OrderAction.ACCEPT)``."""
    action_raw, sep, order_raw = (data or "").strip().partition(":")
    if not sep:
        raise ValidationError(f"Malformed callback data: {data!r}")
    try:
        action = OrderAction(action_raw.lower())
        order_id = int(order_raw)
    except ValueError as exc:
        raise ValidationError(f"Malformed callback data: {data!r}") from exc
    return order_id, action


class TelegramConfirmationChannel(ConfirmationChannel):

    def __init__(
        self,
        token: str,
        chat_id: str,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._chat_id = chat_id
        self._base_url = f"{api_url.rstrip('/')}/bot{token}"
        self._client = client or httpx.Client(timeout=timeout)

    def notify(self, order_id: int, summary: str, actions: list[OrderAction]) -> str:
        payload: dict[str, Any] = {"chat_id": self._chat_id, "text": summary}
        markup = self._keyboard(order_id, actions)
        if markup is not None:
            payload["reply_markup"] = markup

        message = self._call("sendMessage", payload)
        handle = f"{message['chat']['id']}:{message['message_id']}:{order_id}"
        logger.info("Order #%s sent for confirmation (message %s)", order_id, handle)
        return handle

    def update_notification(
        self,
        handle: str,
        text: str,
        actions_remaining: list[OrderAction],
    ) -> None:
        chat_id, message_id, order_id = (handle.split(":") + ["", "", ""])[:3]
        if not chat_id or not message_id.isdigit() or not order_id.isdigit():
            raise ConfirmationChannelError(f"Invalid Telegram delivery handle: {handle!r}")

        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "message_id": int(message_id),
            "text": text,
            # An empty keyboard removes the buttons
            "reply_markup": {"inline_keyboard": []},
        }
        if actions_remaining:
            payload["reply_markup"] = self._keyboard(int(order_id), actions_remaining)
        self._call("editMessageText", payload)

    def close(self) -> None:
        self._client.close()

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _keyboard(order_id: int, actions: list[OrderAction]) -> dict | None:
        if not actions:
            return None
        return {
            "inline_keyboard": [[
                {"text": _BUTTON_LABELS[action], "callback_data": callback_data(order_id, action)}
                for action in actions
            ]]
        }

    def _call(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post(f"{self._base_url}/{method}", json=payload)
        except httpx.HTTPError as exc:
            raise ConfirmationChannelError(f"Telegram {method} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400 or not data.get("ok"):
            description = data.get("description") or response.text
            raise ConfirmationChannelError(
                f"Telegram {method} returned {response.status_code}: {description}"
            )
        return data["result"]
