"""Domain models used by the Pulseboard analytics engine.

Every model is a frozen, request-scoped value object: built fresh for one
orchestrator call and never mutated afterwards.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date as calendar_date
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


def _is_iso_day(value: Any) -> bool:
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        calendar_date.fromisoformat(value)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class PricePoint:
    """One trading day of a symbol's history."""

    date: str
    close: float
    volume: Optional[float] = None

    def __post_init__(self) -> None:
        if not _is_iso_day(self.date):
            raise ValueError(f"date must be an ISO YYYY-MM-DD string, got {self.date!r}")
        if not math.isfinite(self.close) or self.close <= 0:
            raise ValueError("close must be a positive finite number")
        if self.volume is not None and (not math.isfinite(self.volume) or self.volume < 0):
            raise ValueError("volume cannot be negative")


@dataclass(frozen=True)
class Series:
    """A symbol's daily price history, strictly ascending by date."""

    symbol: str
    provider: str
    points: tuple[PricePoint, ...]
    requested_symbol: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))
        for previous, current in zip(self.points, self.points[1:]):
            if current.date <= previous.date:
                raise ValueError(
                    f"Series {self.symbol} is not strictly ascending at {current.date}"
                )

    @classmethod
    def from_points(
        cls,
        symbol: str,
        provider: str,
        points: Iterable[PricePoint],
        *,
        requested_symbol: str | None = None,
    ) -> "Series":
        """Sort unordered provider points and keep the last point seen per date."""

        by_date: dict[str, PricePoint] = {}
        for point in points:
            by_date[point.date] = point
        ordered = tuple(by_date[day] for day in sorted(by_date))
        return cls(symbol=symbol, provider=provider, points=ordered, requested_symbol=requested_symbol)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def closes(self) -> list[float]:
        return [p.close for p in self.points]

    @property
    def dates(self) -> list[str]:
        return [p.date for p in self.points]

    @property
    def has_volume(self) -> bool:
        return any(p.volume is not None for p in self.points)

    def since(self, start: str | None) -> "Series":
        """Return the sub-series dated on or after ``start``."""

        if start is None:
            return self
        return Series(
            symbol=self.symbol,
            provider=self.provider,
            points=tuple(p for p in self.points if p.date >= start),
            requested_symbol=self.requested_symbol,
        )


@dataclass(frozen=True)
class Quote:
    """Lightweight last-price snapshot used when no full series resolves."""

    symbol: str
    last: float
    change_pct: float
    provider: str


@dataclass(frozen=True)
class SymbolMatch:
    symbol: str
    name: str
    region: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class IndicatorSet:
    """Computed metrics for one series. ``None`` marks an unavailable metric."""

    sma50: Optional[float] = None
    sma200: Optional[float] = None
    rsi14: Optional[float] = None
    dist_from_high_pct: Optional[float] = None
    rel_vs_benchmark_6m: Optional[float] = None
    rel_vs_benchmark_12m: Optional[float] = None

    @classmethod
    def unavailable(cls) -> "IndicatorSet":
        return cls()


@dataclass(frozen=True)
class SentimentSample:
    text: str
    score: float


@dataclass(frozen=True)
class StockRow:
    """One watchlist line."""

    symbol: str
    name: str
    last: float
    change_pct: float
    indicators: IndicatorSet
    news_sent: Optional[float]
    reddit_sent: Optional[float]
    live: bool
    provider: str
    resolved_symbol: str


@dataclass(frozen=True)
class ChartPoint:
    date: str
    stock: float
    overlays: Mapping[str, Optional[float]] = field(default_factory=dict)
    volume: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "overlays", MappingProxyType(dict(self.overlays)))


@dataclass(frozen=True)
class ChartPayload:
    points: tuple[ChartPoint, ...]
    overlays_included: tuple[str, ...]


@dataclass(frozen=True)
class WatchlistResult:
    rows: tuple[StockRow, ...]
    live_count: int
    total_count: int

    @property
    def degraded_count(self) -> int:
        return len(self.rows) - self.live_count

    @property
    def dropped_count(self) -> int:
        return self.total_count - len(self.rows)


@dataclass(frozen=True)
class DetailResult:
    row: Optional[StockRow]
    chart: Optional[ChartPayload]


__all__ = [
    "ChartPayload",
    "ChartPoint",
    "DetailResult",
    "IndicatorSet",
    "PricePoint",
    "Quote",
    "SentimentSample",
    "Series",
    "StockRow",
    "SymbolMatch",
    "WatchlistResult",
]
