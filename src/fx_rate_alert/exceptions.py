"""
Custom exceptions for the FX rate alert service.

This module defines the error taxonomy used across the polling, rate
fetching and notification components.
"""

from typing import Any


class FxAlertError(Exception):
    """Base exception for FX rate alert errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "FX_ALERT_ERROR"
        self.context = context or {}


class ConfigurationError(FxAlertError):
    """Exception for missing or invalid configuration."""

    def __init__(
        self,
        message: str,
        variable: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "CONFIGURATION_ERROR", context)
        self.variable = variable


class TransportError(FxAlertError):
    """Exception for network-level failures talking to an external service."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "TRANSPORT_ERROR", context)
        self.service = service


class DecodeError(FxAlertError):
    """Exception for response bodies that cannot be decoded."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "DECODE_ERROR", context)


class ApiError(FxAlertError):
    """Exception for error results reported by the exchange-rate service."""

    def __init__(
        self,
        message: str,
        error_type: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "API_ERROR", context)
        self.error_type = error_type


class NotificationError(FxAlertError):
    """Exception for rejected notification requests."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "NOTIFICATION_ERROR", context)
        self.status_code = status_code
        self.body = body
