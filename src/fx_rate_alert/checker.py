"""
Rate checker for the FX rate alert service.

One check fetches the latest rate, logs it, compares it against the
configured threshold and, on a breach, dispatches the alert. Failures are
logged and never escape a check.
"""

from datetime import datetime
from enum import Enum

import structlog

from .config import Settings
from .exceptions import ApiError, DecodeError, NotificationError, TransportError
from .notifier import TelegramNotifier, format_alert_message
from .rate_client import ExchangeRateClient

logger = structlog.get_logger(__name__)


class CheckOutcome(str, Enum):
    """What the poll loop should do after a check."""

    CONTINUE = "continue"
    STOP = "stop"


class RateChecker:
    """
    Performs a single best-effort rate check.

    The checker owns the decision policy: every failure to obtain a rate
    means "keep polling", and a rate strictly above the threshold means
    "notify and stop".
    """

    def __init__(
        self,
        settings: Settings,
        rate_client: ExchangeRateClient,
        notifier: TelegramNotifier,
    ):
        self.settings = settings
        self.rate_client = rate_client
        self.notifier = notifier

    def exceeds_threshold(self, rate: float) -> bool:
        """Check if a rate is strictly above the notification threshold."""
        return rate > self.settings.notification_threshold

    async def check(self) -> CheckOutcome:
        """
        Run one check.

        Returns:
            CheckOutcome.STOP once an alert has been dispatched, otherwise
            CheckOutcome.CONTINUE
        """
        base = self.settings.base_currency
        target = self.settings.target_currency

        try:
            snapshot = await self.rate_client.fetch_latest(base)
        except TransportError as e:
            logger.error("Exchange-rate request failed", error=str(e))
            return CheckOutcome.CONTINUE
        except DecodeError as e:
            logger.error("Failed to decode exchange-rate response", error=str(e))
            return CheckOutcome.CONTINUE

        if not snapshot.is_success:
            logger.error(
                "Exchange-rate API returned an error",
                result=snapshot.result,
                error_type=snapshot.error_type,
            )
            return CheckOutcome.CONTINUE

        try:
            rate = snapshot.rate_for(target)
        except ApiError as e:
            logger.error("Currency not found", currency=target, error=str(e))
            return CheckOutcome.CONTINUE

        logger.info(
            f"Current rate: 1 {base} = {rate:.4f} {target}",
            checked_at=datetime.now().isoformat(timespec="seconds"),
            rate=rate,
            threshold=self.settings.notification_threshold,
        )

        if not self.exceeds_threshold(rate):
            return CheckOutcome.CONTINUE

        logger.warning(
            "Threshold exceeded, sending Telegram notification",
            rate=rate,
            threshold=self.settings.notification_threshold,
        )
        await self._notify(rate)
        return CheckOutcome.STOP

    async def _notify(self, rate: float) -> None:
        """Send the alert; delivery is best-effort and failures are only logged."""
        message = format_alert_message(self.settings, rate)

        try:
            await self.notifier.send(message)
        except NotificationError as e:
            logger.error(
                "Unable to send Telegram notification",
                status_code=e.status_code,
                body=e.body,
            )
        except TransportError as e:
            logger.error("Unable to send Telegram notification", error=str(e))
        except Exception as e:
            logger.error(
                "Unexpected error sending Telegram notification", error=str(e)
            )
        else:
            logger.info("Notification sent successfully, stopping")
