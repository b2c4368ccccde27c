from __future__ import annotations

from typing import Optional


class StockSenseError(Exception):
    """Base exception for application-level errors."""


class ConfigurationError(StockSenseError):
    """Raised when a model provider cannot be used because setup is incomplete."""


class ValidationError(StockSenseError):
    """Raised when request payload fails domain-level validation."""


class ProviderExecutionError(StockSenseError):
    """Raised when a model provider call fails at the transport level."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QuoteUnavailableError(StockSenseError):
    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unable to fetch a live price for {symbol}. Please verify the ticker and retry.")
        self.symbol = symbol


class AnalysisInterruptedError(StockSenseError):
    DEFAULT_MESSAGE = "Market intelligence link interrupted. Please check your API key and network."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)


class RateLimitedError(AnalysisInterruptedError):
    """Provider quota exhausted; the request may succeed after a delay."""

    def __init__(self, retry_after: Optional[float] = None) -> None:
        hint = f" in about {int(retry_after)} seconds" if retry_after else " in a minute"
        super().__init__(f"Model provider rate limit reached. Please retry{hint}.")
        self.retry_after = retry_after
