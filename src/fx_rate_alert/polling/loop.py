"""
Poll loop for the FX rate alert service.

This module runs rate checks strictly one after another: immediately at
start, then once per configured interval, until a check reports that the
alert was dispatched or a shutdown is requested.
"""

import asyncio
from enum import Enum

import structlog

from ..checker import CheckOutcome, RateChecker
from ..config import Settings

logger = structlog.get_logger(__name__)


class LoopState(str, Enum):
    """Poll loop lifecycle states."""

    RUNNING = "running"
    STOPPED = "stopped"


class PollLoop:
    """
    Schedules rate checks until the threshold is breached.

    Only one check is ever in flight; the wait for the next tick starts after
    the previous check (and any notification it sent) has completed. Ticks are
    therefore spaced by the interval plus the check duration, not scheduled on
    a fixed cadence.
    """

    def __init__(self, checker: RateChecker, settings: Settings):
        """
        Initialize the poll loop.

        Args:
            checker: Rate checker run on every tick
            settings: Application settings
        """
        self.checker = checker
        self.settings = settings
        self.state = LoopState.RUNNING
        self.tick_count = 0
        self._shutdown_event = asyncio.Event()

    def is_running(self) -> bool:
        """Check if the loop has not reached its terminal state."""
        return self.state is LoopState.RUNNING

    def stop(self) -> None:
        """Request shutdown; interrupts the wait between ticks."""
        if self._shutdown_event.is_set():
            return

        logger.info("Stopping poll loop", ticks=self.tick_count)
        self._shutdown_event.set()

    async def run(self) -> None:
        """Run ticks until an alert is sent or shutdown is requested."""
        logger.info(
            "Starting poll loop",
            currency_pair=self.settings.currency_pair,
            interval_minutes=self.settings.check_interval_minutes,
        )

        try:
            while not self._shutdown_event.is_set():
                outcome = await self._tick()

                if outcome is CheckOutcome.STOP:
                    logger.info(
                        "Alert dispatched, poll loop finished", ticks=self.tick_count
                    )
                    break

                if await self._wait_for_next_tick():
                    logger.info(
                        "Shutdown requested, poll loop finished",
                        ticks=self.tick_count,
                    )
                    break
        finally:
            self.state = LoopState.STOPPED

    async def _tick(self) -> CheckOutcome:
        """Run one check; unexpected errors are logged and polling continues."""
        self.tick_count += 1
        logger.debug("Tick started", tick=self.tick_count)

        try:
            return await self.checker.check()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Unexpected error during rate check", error=str(e))
            return CheckOutcome.CONTINUE

    async def _wait_for_next_tick(self) -> bool:
        """
        Wait for the next tick.

        Returns:
            True if shutdown was requested while waiting
        """
        try:
            await asyncio.wait_for(
                self._shutdown_event.wait(),
                timeout=self.settings.check_interval_seconds,
            )
        except asyncio.TimeoutError:
            return False
        return True
