"""
FX Rate Alert

Polls an exchange-rate API and sends a one-shot Telegram notification when a
currency pair rises above a configured threshold.
"""

__version__ = "0.1.0"

from .checker import CheckOutcome, RateChecker
from .config import Settings, load_settings
from .exceptions import FxAlertError
from .notifier import TelegramNotifier
from .polling import LoopState, PollLoop
from .rate_client import ExchangeRateClient, RateSnapshot

__all__ = [
    "Settings",
    "load_settings",
    "ExchangeRateClient",
    "RateSnapshot",
    "TelegramNotifier",
    "RateChecker",
    "CheckOutcome",
    "PollLoop",
    "LoopState",
    "FxAlertError",
]
