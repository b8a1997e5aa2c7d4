"""
Telegram notifier for the FX rate alert service.

This module formats threshold alerts and delivers them through the Telegram
Bot API ``sendMessage`` endpoint.
"""

from typing import Any

import httpx
import structlog

from .config import Settings
from .exceptions import NotificationError, TransportError

logger = structlog.get_logger(__name__)

PARSE_MODE = "Markdown"


def format_alert_message(settings: Settings, rate: float) -> str:
    """
    Build the Markdown alert text for a threshold breach.

    Args:
        settings: Application settings
        rate: Observed conversion rate

    Returns:
        Message text ready to be sent
    """
    base = settings.base_currency
    target = settings.target_currency
    return (
        f"🔔 *FX alert {base}/{target}!*\n\n"
        f"The rate has exceeded the threshold of "
        f"*{settings.notification_threshold:.4f}*.\n\n"
        f"Current value: `1 {base} = {rate:.4f} {target}`"
    )


class TelegramNotifier:
    """Sends messages to a Telegram chat."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the notifier.

        Args:
            settings: Application settings
            transport: Optional transport override, used by tests
        """
        self.settings = settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> "TelegramNotifier":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @property
    def send_message_url(self) -> str:
        return (
            f"{self.settings.telegram_api_url}"
            f"/bot{self.settings.telegram_token}/sendMessage"
        )

    async def send(self, text: str) -> None:
        """
        Send a message to the configured chat.

        Args:
            text: Markdown message body

        Raises:
            TransportError: If the request could not be completed
            NotificationError: If Telegram rejected the message
        """
        try:
            response = await self._client.post(
                self.send_message_url,
                data={
                    "chat_id": self.settings.telegram_chat_id,
                    "text": text,
                    "parse_mode": PARSE_MODE,
                },
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(
                f"Telegram request failed: {e!r}", service="telegram"
            ) from e

        if not response.is_success:
            raise NotificationError(
                f"Telegram returned an error ({response.status_code}): "
                f"{response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug(
            "Telegram message accepted",
            chat_id=self.settings.telegram_chat_id,
            status_code=response.status_code,
        )
