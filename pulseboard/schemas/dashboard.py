"""Response schemas for watchlist, detail and sentiment endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from pulseboard.models import ChartPayload, DetailResult, IndicatorSet, StockRow, WatchlistResult


class IndicatorSetSchema(BaseModel):
    """Window-based metrics; ``null`` means not enough history."""

    sma50: Optional[float] = None
    sma200: Optional[float] = None
    rsi14: Optional[float] = Field(default=None, ge=0, le=100)
    dist_from_high_pct: Optional[float] = Field(
        default=None, description="Percent below the 52-week high (0 at a new high)"
    )
    rel_vs_benchmark_6m: Optional[float] = None
    rel_vs_benchmark_12m: Optional[float] = None

    @classmethod
    def from_domain(cls, indicators: IndicatorSet) -> "IndicatorSetSchema":
        return cls(
            sma50=indicators.sma50,
            sma200=indicators.sma200,
            rsi14=indicators.rsi14,
            dist_from_high_pct=indicators.dist_from_high_pct,
            rel_vs_benchmark_6m=indicators.rel_vs_benchmark_6m,
            rel_vs_benchmark_12m=indicators.rel_vs_benchmark_12m,
        )


class StockRowSchema(BaseModel):
    symbol: str = Field(..., examples=["VOLV-B.ST"])
    name: str
    last: float
    change_pct: float
    indicators: IndicatorSetSchema
    news_sent: Optional[float] = Field(default=None, ge=-1, le=1)
    reddit_sent: Optional[float] = Field(default=None, ge=-1, le=1)
    live: bool = Field(..., description="True when a full price history backs the row")
    provider: str
    resolved_symbol: str

    @classmethod
    def from_domain(cls, row: StockRow) -> "StockRowSchema":
        return cls(
            symbol=row.symbol,
            name=row.name,
            last=row.last,
            change_pct=row.change_pct,
            indicators=IndicatorSetSchema.from_domain(row.indicators),
            news_sent=row.news_sent,
            reddit_sent=row.reddit_sent,
            live=row.live,
            provider=row.provider,
            resolved_symbol=row.resolved_symbol,
        )


class WatchlistResponse(BaseModel):
    rows: list[StockRowSchema]
    live_count: int
    total_count: int
    degraded_count: int
    dropped_count: int

    @classmethod
    def from_domain(cls, result: WatchlistResult) -> "WatchlistResponse":
        return cls(
            rows=[StockRowSchema.from_domain(row) for row in result.rows],
            live_count=result.live_count,
            total_count=result.total_count,
            degraded_count=result.degraded_count,
            dropped_count=result.dropped_count,
        )


class ChartPointSchema(BaseModel):
    date: str
    stock: float = Field(..., description="Close indexed to 100 at the first point of the window")
    overlays: dict[str, Optional[float]] = Field(default_factory=dict)
    volume: Optional[float] = None


class ChartPayloadSchema(BaseModel):
    points: list[ChartPointSchema]
    overlays_included: list[str]

    @classmethod
    def from_domain(cls, chart: ChartPayload) -> "ChartPayloadSchema":
        return cls(
            points=[
                ChartPointSchema(
                    date=point.date,
                    stock=point.stock,
                    overlays=dict(point.overlays),
                    volume=point.volume,
                )
                for point in chart.points
            ],
            overlays_included=list(chart.overlays_included),
        )


class DetailResponse(BaseModel):
    row: StockRowSchema
    chart: Optional[ChartPayloadSchema] = None
    range: str

    @classmethod
    def from_domain(cls, result: DetailResult, chart_range: str) -> "DetailResponse":
        if result.row is None:
            raise ValueError("Detail result has no row")
        return cls(
            row=StockRowSchema.from_domain(result.row),
            chart=ChartPayloadSchema.from_domain(result.chart) if result.chart is not None else None,
            range=chart_range,
        )


class SentimentResponse(BaseModel):
    symbol: str
    news: Optional[float] = Field(default=None, ge=-1, le=1)
    reddit: Optional[float] = Field(default=None, ge=-1, le=1)


__all__ = [
    "ChartPayloadSchema",
    "ChartPointSchema",
    "DetailResponse",
    "IndicatorSetSchema",
    "SentimentResponse",
    "StockRowSchema",
    "WatchlistResponse",
]
