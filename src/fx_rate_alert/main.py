"""
Main application entry point for the FX rate alert service.

This module loads configuration, configures logging, wires the rate client,
notifier and checker together and runs the poll loop until an alert is sent.
"""

import asyncio
import signal
import sys

import structlog

from .checker import RateChecker
from .config import Settings, load_settings
from .exceptions import ConfigurationError
from .logging_config import setup_logging
from .notifier import TelegramNotifier
from .polling import PollLoop
from .rate_client import ExchangeRateClient

logger = structlog.get_logger(__name__)


def setup_signal_handlers(poll_loop: PollLoop) -> None:
    """Set up signal handlers for graceful shutdown."""
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, poll_loop.stop)
        except NotImplementedError:
            logger.warning("Signal handlers not supported", signal=sig.name)


async def run(settings: Settings) -> None:
    """Run the poll loop with freshly created HTTP clients."""
    async with (
        ExchangeRateClient(settings) as rate_client,
        TelegramNotifier(settings) as notifier,
    ):
        checker = RateChecker(settings, rate_client, notifier)
        poll_loop = PollLoop(checker, settings)
        setup_signal_handlers(poll_loop)
        await poll_loop.run()


def main() -> None:
    """Main entry point."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        sys.exit(f"Configuration error: {e}")

    setup_logging(settings)

    logger.info(
        "Starting FX rate alert with Telegram notifications",
        currency_pair=settings.currency_pair,
    )
    logger.info(
        f"Threshold: > {settings.notification_threshold:.4f} "
        f"{settings.target_currency}"
    )
    logger.info(
        "Check interval configured",
        interval_minutes=settings.check_interval_minutes,
        http_timeout_seconds=settings.http_timeout_seconds,
    )

    asyncio.run(run(settings))
    logger.info("FX rate alert stopped")


if __name__ == "__main__":
    main()
