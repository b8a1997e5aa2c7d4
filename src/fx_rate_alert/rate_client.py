"""
Exchange-rate API client for the FX rate alert service.

This module fetches the latest conversion rates for a base currency and
decodes them into a RateSnapshot.
"""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, ValidationError

from .config import Settings
from .exceptions import ApiError, DecodeError, TransportError

logger = structlog.get_logger(__name__)

SUCCESS_RESULT = "success"


class RateSnapshot(BaseModel):
    """One decoded response from the exchange-rate service."""

    model_config = ConfigDict(populate_by_name=True)

    result: str = Field(default="", description="Result status reported by the API")
    error_type: str | None = Field(
        default=None, alias="error-type", description="Error classification"
    )
    conversion_rates: dict[str, StrictFloat] = Field(
        default_factory=dict,
        description="Currency code to rate mapping",
    )

    @property
    def is_success(self) -> bool:
        """Check if the service reported a successful lookup."""
        return self.result == SUCCESS_RESULT

    def rate_for(self, currency: str) -> float:
        """
        Get the conversion rate for a currency.

        Args:
            currency: Target currency code

        Returns:
            Conversion rate from the base currency

        Raises:
            ApiError: If the currency is not in the returned mapping
        """
        try:
            return self.conversion_rates[currency]
        except KeyError:
            raise ApiError(
                f"Currency '{currency}' not found in conversion rates",
                error_type="currency-not-found",
                context={"currency": currency},
            ) from None


class ExchangeRateClient:
    """Async client for the exchange-rate service."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the exchange-rate client.

        Args:
            settings: Application settings
            transport: Optional transport override, used by tests
        """
        self.settings = settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout_seconds),
            transport=transport,
        )

    async def __aenter__(self) -> "ExchangeRateClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    def latest_url(self, base_currency: str) -> str:
        """Build the latest-rates URL for a base currency."""
        return (
            f"{self.settings.rate_api_url}/{self.settings.api_key}"
            f"/latest/{base_currency}"
        )

    async def fetch_latest(self, base_currency: str | None = None) -> RateSnapshot:
        """
        Fetch the latest conversion rates.

        Args:
            base_currency: Currency to price, defaults to the configured one

        Returns:
            Decoded rate snapshot, which may carry an error result

        Raises:
            TransportError: If the request could not be completed
            DecodeError: If the response body is not a valid rate payload
        """
        base = base_currency or self.settings.base_currency

        try:
            response = await self._client.get(self.latest_url(base))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(
                f"Exchange-rate request failed: {e!r}",
                service="exchange-rate",
                context={"base_currency": base},
            ) from e

        logger.debug(
            "Exchange-rate response received",
            base_currency=base,
            status_code=response.status_code,
        )

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Exchange-rate response is not valid JSON: {e}",
                context={"status_code": response.status_code},
            ) from e

        if not isinstance(payload, dict):
            raise DecodeError(
                f"Exchange-rate response must be a JSON object, got "
                f"{type(payload).__name__}",
                context={"status_code": response.status_code},
            )

        # Rates of a failed lookup are never used.
        if payload.get("result") != SUCCESS_RESULT:
            payload = {k: v for k, v in payload.items() if k != "conversion_rates"}

        try:
            return RateSnapshot.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Exchange-rate response has an unexpected shape: {e}",
                context={"status_code": response.status_code},
            ) from e
