"""
Tests for the rate checker decision policy.

Each test runs one check against fake exchange-rate and Telegram APIs and
verifies the outcome, the notifications sent and what was logged.
"""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import pytest
from structlog.testing import capture_logs

from fx_rate_alert.checker import CheckOutcome, RateChecker
from fx_rate_alert.notifier import TelegramNotifier
from fx_rate_alert.rate_client import ExchangeRateClient


def rates(**conversion_rates: float) -> dict:
    return {"result": "success", "conversion_rates": conversion_rates}


@pytest.fixture
def make_checker(mock_settings, rate_transport, telegram_transport):
    """Build a checker wired to fake services."""

    def factory(payload=None, rate_api=None, telegram_api=None) -> RateChecker:
        rate_client = ExchangeRateClient(
            mock_settings, transport=rate_api or rate_transport(payload)
        )
        notifier = TelegramNotifier(
            mock_settings, transport=telegram_api or telegram_transport()
        )
        return RateChecker(mock_settings, rate_client, notifier)

    return factory


class TestRateChecker:
    """Test RateChecker.check."""

    @pytest.mark.asyncio
    async def test_rate_above_threshold_notifies_and_stops(
        self, make_checker, telegram_requests
    ):
        """Test that a breach sends exactly one notification."""
        checker = make_checker(rates(EUR=1.25, USD=1.3))

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.STOP
        assert len(telegram_requests) == 1
        form = parse_qs(telegram_requests[0].content.decode())
        assert "`1 GBP = 1.2500 EUR`" in form["text"][0]

        events = [log["event"] for log in logs]
        assert "Current rate: 1 GBP = 1.2500 EUR" in events
        assert "Threshold exceeded, sending Telegram notification" in events
        assert "Notification sent successfully, stopping" in events
        rate_log = next(log for log in logs if log["event"].startswith("Current"))
        assert "checked_at" in rate_log

    @pytest.mark.asyncio
    async def test_rate_below_threshold_continues(
        self, make_checker, telegram_requests
    ):
        checker = make_checker(rates(EUR=1.10))

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []
        assert logs[-1]["event"] == "Current rate: 1 GBP = 1.1000 EUR"

    @pytest.mark.asyncio
    async def test_rate_equal_to_threshold_does_not_notify(
        self, make_checker, telegram_requests
    ):
        """Test that the comparison is strictly greater-than."""
        checker = make_checker(rates(EUR=1.20))

        outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []

    @pytest.mark.parametrize(
        "rate, expected",
        [(1.2000001, True), (1.2, False), (1.1999999, False), (-1.0, False)],
    )
    def test_exceeds_threshold(self, make_checker, rate, expected):
        assert make_checker(rates()).exceeds_threshold(rate) is expected

    @pytest.mark.asyncio
    async def test_api_error_result(self, make_checker, telegram_requests):
        """Test that an error result logs its type and never notifies."""
        checker = make_checker({"result": "error", "error-type": "invalid-key"})

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []
        assert logs[-1]["event"] == "Exchange-rate API returned an error"
        assert logs[-1]["error_type"] == "invalid-key"
        assert logs[-1]["log_level"] == "error"

    @pytest.mark.asyncio
    async def test_error_result_with_rates_never_notifies(
        self, make_checker, telegram_requests
    ):
        checker = make_checker(
            {"result": "error", "conversion_rates": {"EUR": 99.0}}
        )

        assert await checker.check() is CheckOutcome.CONTINUE
        assert telegram_requests == []

    @pytest.mark.asyncio
    async def test_currency_not_found(self, make_checker, telegram_requests):
        """Test that a missing target currency is logged and polling continues."""
        checker = make_checker(rates(USD=1.27))

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []
        assert logs[-1]["event"] == "Currency not found"
        assert logs[-1]["currency"] == "EUR"

    @pytest.mark.asyncio
    async def test_undecodable_response(self, make_checker, telegram_requests):
        checker = make_checker("not json")

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []
        assert logs[-1]["event"] == "Failed to decode exchange-rate response"

    @pytest.mark.asyncio
    async def test_rate_service_unreachable(
        self, make_checker, failing_transport, telegram_requests
    ):
        """Test that a transport failure skips the tick."""
        checker = make_checker(rate_api=failing_transport)

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.CONTINUE
        assert telegram_requests == []
        assert logs[-1]["event"] == "Exchange-rate request failed"

    @pytest.mark.asyncio
    async def test_rejected_notification_still_stops(
        self, make_checker, telegram_transport, telegram_requests
    ):
        """Test that delivery is best-effort and the stop decision holds."""
        checker = make_checker(
            rates(EUR=1.25),
            telegram_api=telegram_transport(status_code=500, body="upstream down"),
        )

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.STOP
        assert len(telegram_requests) == 1
        failure = logs[-1]
        assert failure["event"] == "Unable to send Telegram notification"
        assert failure["status_code"] == 500
        assert failure["body"] == "upstream down"

    @pytest.mark.asyncio
    async def test_unreachable_messaging_service_still_stops(
        self, make_checker, failing_transport
    ):
        checker = make_checker(rates(EUR=1.25), telegram_api=failing_transport)

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.STOP
        assert logs[-1]["event"] == "Unable to send Telegram notification"
        assert logs[-1]["log_level"] == "error"

    @pytest.mark.asyncio
    async def test_unbuildable_telegram_url_still_stops(
        self, mock_settings, rate_transport
    ):
        """Test that a Telegram URL httpx rejects does not undo the stop."""
        settings = mock_settings.model_copy(
            update={"telegram_api_url": "https://api.telegram.org:abc"}
        )
        checker = RateChecker(
            settings,
            ExchangeRateClient(settings, transport=rate_transport(rates(EUR=1.25))),
            TelegramNotifier(settings),
        )

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.STOP
        assert logs[-1]["event"] == "Unable to send Telegram notification"
        assert "Invalid port" in logs[-1]["error"]

    @pytest.mark.asyncio
    async def test_unexpected_notifier_error_still_stops(self, make_checker):
        checker = make_checker(rates(EUR=1.25))
        checker.notifier.send = AsyncMock(side_effect=RuntimeError("boom"))

        with capture_logs() as logs:
            outcome = await checker.check()

        assert outcome is CheckOutcome.STOP
        checker.notifier.send.assert_awaited_once()
        assert logs[-1]["event"] == "Unexpected error sending Telegram notification"
        assert logs[-1]["error"] == "boom"
