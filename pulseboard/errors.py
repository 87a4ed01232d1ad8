"""Error taxonomy shared by the fetch boundary and the resolver."""

from __future__ import annotations


class MarketDataError(RuntimeError):
    """Base class for failures originating at a market-data or text provider."""

    def __init__(self, message: str, *, provider: str | None = None, symbol: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.symbol = symbol


class ProviderUnavailable(MarketDataError):
    """Raised on network failures, HTTP errors, throttling notes or missing credentials."""


class NoData(MarketDataError):
    """Raised when a provider answers with an empty or structurally invalid payload."""


class ParseError(NoData):
    """Raised when a payload violates the expected provider schema."""


class InsufficientHistory(MarketDataError):
    """Raised when a series is shorter than the caller's minimum viable length."""


__all__ = [
    "InsufficientHistory",
    "MarketDataError",
    "NoData",
    "ParseError",
    "ProviderUnavailable",
]
