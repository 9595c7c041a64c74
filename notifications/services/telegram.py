from __future__ import annotations

from typing import Any, Iterable

import httpx
from django.utils import timezone

from ..models import Notification, TelegramBotConfig


class TelegramNotificationError(Exception):
    """Raised when the Telegram API rejects a message or cannot be reached."""

    def __init__(self, message: str, *, response: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.response = response or {}


class TelegramAPIClient:
    """Thin client for the Telegram Bot API."""

    def __init__(self, bot: TelegramBotConfig, *, timeout: float = 10.0) -> None:
        self.bot = bot
        self.timeout = timeout

    def _request(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.bot.api_base_url}/{method}"
        response = httpx.post(url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if not data.get("ok", False):
            raise TelegramNotificationError(
                data.get("description") or "Telegram API error.",
                response=data,
            )
        return data

    def send_message(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send a message through sendMessage."""
        return self._request("sendMessage", payload)


class TelegramNotificationSender:
    """Forwards stored notifications to the alert chat of every active bot."""

    def __init__(self, *, timeout: float = 10.0, bots: Iterable[TelegramBotConfig] | None = None) -> None:
        self.timeout = timeout
        self._bots = bots

    def active_bots(self) -> list[TelegramBotConfig]:
        if self._bots is not None:
            return [bot for bot in self._bots if bot.is_active]
        return list(TelegramBotConfig.objects.filter(is_active=True))

    @staticmethod
    def format_text(notification: Notification) -> str:
        lines = [notification.title, notification.message]
        if notification.action_url:
            lines.append(notification.action_url)
        return "\n".join(line for line in lines if line)

    def send_notification(self, notification: Notification) -> list[dict[str, Any]]:
        text = self.format_text(notification)
        if not text:
            raise TelegramNotificationError("The notification has no text to send.")

        responses: list[dict[str, Any]] = []
        for bot in self.active_bots():
            message_payload: dict[str, Any] = {
                "chat_id": bot.chat_id,
                "text": text,
                "disable_notification": notification.priority == Notification.Priority.LOW,
            }
            if bot.default_parse_mode:
                message_payload["parse_mode"] = bot.default_parse_mode

            client = TelegramAPIClient(bot, timeout=self.timeout)
            try:
                response = client.send_message(message_payload)
            except httpx.HTTPError as exc:
                raise TelegramNotificationError("Transport error while sending the notification.") from exc
            bot.last_sent_at = timezone.now()
            bot.save(update_fields=("last_sent_at", "updated_at"))
            responses.append(response)
        return responses

    def __call__(self, notification: Notification) -> list[dict[str, Any]]:
        return self.send_notification(notification)
