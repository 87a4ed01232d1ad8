"""Pydantic schemas for provider payloads and API responses."""

from .dashboard import (
    ChartPayloadSchema,
    ChartPointSchema,
    DetailResponse,
    IndicatorSetSchema,
    SentimentResponse,
    StockRowSchema,
    WatchlistResponse,
)
from .symbols import SymbolSearchResponse, SymbolSearchResultSchema
from .system import DiagResponse, PrewarmResponse

__all__ = [
    "ChartPayloadSchema",
    "ChartPointSchema",
    "DetailResponse",
    "DiagResponse",
    "IndicatorSetSchema",
    "PrewarmResponse",
    "SentimentResponse",
    "StockRowSchema",
    "SymbolSearchResponse",
    "SymbolSearchResultSchema",
    "WatchlistResponse",
]
