"""
Pytest configuration and fixtures for FX rate alert tests.
"""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from fx_rate_alert.config import Settings


@pytest.fixture
def required_env() -> dict[str, str]:
    """Minimal environment needed to start the service."""
    return {
        "API_KEY": "test-key",
        "TELEGRAM_TOKEN": "test-token",
        "TELEGRAM_CHAT_ID": "12345",
        "NOTIFICATION_THRESHOLD": "1.20",
    }


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for a GBP/EUR watch with a 1.20 threshold."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        api_key="test-key",
        telegram_token="test-token",
        telegram_chat_id="12345",
        notification_threshold=1.20,
        base_currency="GBP",
        target_currency="EUR",
        rate_api_url="https://rates.test/v6",
        telegram_api_url="https://telegram.test",
    )


@pytest.fixture
def rate_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for a transport answering every request with a fixed payload."""

    def factory(payload: Any, status_code: int = 200) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if isinstance(payload, (bytes, str)):
                return httpx.Response(status_code, content=payload)
            return httpx.Response(status_code, content=json.dumps(payload))

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def telegram_requests() -> list[httpx.Request]:
    """Requests received by the fake Telegram API."""
    return []


@pytest.fixture
def telegram_transport(
    telegram_requests: list[httpx.Request],
) -> Callable[..., httpx.MockTransport]:
    """Factory for a fake Telegram API that records every request."""

    def factory(
        status_code: int = 200, body: str = '{"ok": true}'
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            telegram_requests.append(request)
            return httpx.Response(status_code, content=body)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def failing_transport() -> httpx.MockTransport:
    """Transport that fails every request with a connection error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)
