"""Watchlist rows and single-symbol detail records.

The orchestrator owns concurrency and the degradation ladder: a full series
with indicators and sentiment, then a quote-only row that keeps sentiment,
then a quote-only row without it, and finally omission of the symbol.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Mapping, Sequence, TypeVar

from pulseboard.config import AppSettings, get_settings
from pulseboard.core.telemetry import record_row_outcomes
from pulseboard.errors import MarketDataError
from pulseboard.indicators import compute_indicators, day_change_pct
from pulseboard.models import (
    DetailResult,
    IndicatorSet,
    Quote,
    Series,
    StockRow,
    SymbolMatch,
    WatchlistResult,
)
from pulseboard.services.charts import merge_chart, normalize_range, range_start
from pulseboard.services.gateway import MarketDataGateway
from pulseboard.services.resolver import Resolved, SeriesResolver, merge_matches
from pulseboard.services.sentiment import SentimentService, SentimentSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Enough history for the relative-performance horizons to be meaningful
_BENCHMARK_MIN_POINTS = 20


async def _best_effort(label: str, awaitable: Awaitable[T]) -> T | None:
    try:
        return await awaitable
    except Exception:
        logger.exception("%s failed", label)
        return None


class DashboardService:
    """Composes resolution, indicators, sentiment and chart merging."""

    def __init__(
        self,
        gateway: MarketDataGateway,
        settings: AppSettings | None = None,
        *,
        resolver: SeriesResolver | None = None,
        sentiment: SentimentService | None = None,
    ) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()
        self._resolver = resolver or SeriesResolver(gateway, self._settings)
        self._sentiment = sentiment or SentimentService(gateway, self._settings)

    async def _benchmark(self, lookback_days: int) -> Series | None:
        outcome = await self._resolver.resolve(
            self._settings.benchmark_symbol, _BENCHMARK_MIN_POINTS, lookback_days, allow_search=False
        )
        if isinstance(outcome, Resolved):
            return outcome.series
        logger.warning("Benchmark %s unavailable; relative performance omitted", self._settings.benchmark_symbol)
        return None

    async def _overlay(self, lookback_days: int) -> Series | None:
        outcome = await self._resolver.resolve_first(
            self._settings.overlay_candidates, _BENCHMARK_MIN_POINTS, lookback_days
        )
        if isinstance(outcome, Resolved):
            return outcome.series
        logger.warning("Regional overlay unavailable after %d attempts", len(outcome.attempts))
        return None

    async def _quote(self, symbol: str) -> Quote | None:
        for provider in self._resolver.provider_order(symbol):
            try:
                return await self._gateway.fetch_quote(provider, symbol)
            except MarketDataError as exc:
                logger.warning("Quote via %s failed for %s: %s", provider, symbol, exc)
        return None

    async def _build_row(
        self,
        symbol: str,
        name: str | Awaitable[str | None],
        *,
        min_points: int,
        lookback_days: int,
        benchmark: Awaitable[Series | None],
        require_volume: bool = False,
    ) -> tuple[StockRow | None, Resolved | None]:
        """Resolve the series while the name (if still pending) and sentiment load."""

        async def named_sentiment() -> tuple[str, SentimentSnapshot]:
            label = name if isinstance(name, str) else (await name or symbol)
            return label, await self._sentiment.snapshot(symbol, label)

        outcome, (label, sentiment) = await asyncio.gather(
            self._resolver.resolve(symbol, min_points, lookback_days, require_volume=require_volume),
            named_sentiment(),
        )
        if isinstance(outcome, Resolved):
            closes = outcome.series.closes
            bench = await benchmark
            row = StockRow(
                symbol=symbol,
                name=label,
                last=closes[-1],
                change_pct=day_change_pct(closes) or 0.0,
                indicators=compute_indicators(closes, bench.closes if bench is not None else None),
                news_sent=sentiment.news,
                reddit_sent=sentiment.reddit,
                live=True,
                provider=outcome.provider,
                resolved_symbol=outcome.symbol,
            )
            return row, outcome

        logger.info("No series for %s after %d attempts; falling back to quote", symbol, len(outcome.attempts))
        quote = await self._quote(symbol)
        if quote is None:
            logger.warning("Dropping %s: neither series nor quote available", symbol)
            return None, None
        return self._quote_row(symbol, label, quote, sentiment), None

    @staticmethod
    def _quote_row(symbol: str, name: str, quote: Quote, sentiment: SentimentSnapshot) -> StockRow:
        return StockRow(
            symbol=symbol,
            name=name,
            last=quote.last,
            change_pct=quote.change_pct,
            indicators=IndicatorSet.unavailable(),
            news_sent=sentiment.news,
            reddit_sent=sentiment.reddit,
            live=False,
            provider=quote.provider,
            resolved_symbol=quote.symbol,
        )

    async def _watchlist_row(self, symbol: str, name: str, benchmark: Awaitable[Series | None]) -> StockRow | None:
        try:
            row, _ = await self._build_row(
                symbol,
                name,
                min_points=self._settings.watchlist_min_points,
                lookback_days=self._settings.watchlist_lookback_days,
                benchmark=benchmark,
            )
        except Exception:
            logger.exception("Unexpected failure building row for %s", symbol)
            return None
        return row

    async def build_watchlist_rows(
        self,
        symbols: Sequence[str],
        names: Mapping[str, str] | None = None,
    ) -> WatchlistResult:
        """Build one row per symbol concurrently, preserving input order."""

        names = names or {}
        lookback = self._settings.watchlist_lookback_days
        async with asyncio.TaskGroup() as group:
            benchmark = group.create_task(_best_effort("Benchmark resolution", self._benchmark(lookback)))
            tasks = [
                group.create_task(self._watchlist_row(symbol, names.get(symbol, symbol), benchmark))
                for symbol in symbols
            ]

        rows = tuple(row for row in (task.result() for task in tasks) if row is not None)
        result = WatchlistResult(rows=rows, live_count=sum(row.live for row in rows), total_count=len(symbols))
        record_row_outcomes(
            "watchlist",
            live=result.live_count,
            degraded=result.degraded_count,
            dropped=result.dropped_count,
        )
        logger.info(
            "Watchlist built: %d live, %d degraded, %d dropped of %d",
            result.live_count,
            result.degraded_count,
            result.dropped_count,
            result.total_count,
        )
        return result

    async def display_name(self, symbol: str) -> str:
        """Company name from symbol search, falling back to the ticker."""

        for match in await self.symbol_search(symbol):
            if match.symbol.upper() == symbol.upper() and match.name:
                return match.name
        return symbol

    async def _detail_row(
        self, symbol: str, name: Awaitable[str | None], benchmark: Awaitable[Series | None]
    ) -> tuple[StockRow | None, Resolved | None]:
        try:
            return await self._build_row(
                symbol,
                name,
                min_points=self._settings.detail_min_points,
                lookback_days=self._settings.detail_lookback_days,
                benchmark=benchmark,
                require_volume=True,
            )
        except Exception:
            logger.exception("Unexpected failure building detail for %s", symbol)
            return None, None

    async def build_detail(self, symbol: str, chart_range: str = "1Y") -> DetailResult:
        chart_range = normalize_range(chart_range)
        lookback = self._settings.detail_lookback_days

        async with asyncio.TaskGroup() as group:
            name_task = group.create_task(_best_effort(f"Name lookup for {symbol}", self.display_name(symbol)))
            benchmark_task = group.create_task(_best_effort("Benchmark overlay", self._benchmark(lookback)))
            overlay_task = group.create_task(_best_effort("Regional overlay", self._overlay(lookback)))
            row_task = group.create_task(self._detail_row(symbol, name_task, benchmark_task))

        row, resolved = row_task.result()
        if row is None:
            record_row_outcomes("detail", live=0, degraded=0, dropped=1)
            return DetailResult(row=None, chart=None)
        record_row_outcomes("detail", live=int(row.live), degraded=int(not row.live), dropped=0)
        if resolved is None:
            return DetailResult(row=row, chart=None)

        overlays: dict[str, Series] = {}
        if benchmark_task.result() is not None:
            overlays[self._settings.benchmark_label] = benchmark_task.result()
        if overlay_task.result() is not None:
            overlays[self._settings.overlay_label] = overlay_task.result()

        series = resolved.series
        chart = merge_chart(series, overlays, start=range_start(series.dates[-1], chart_range))
        return DetailResult(row=row, chart=chart)

    async def sentiment(self, symbol: str) -> SentimentSnapshot:
        return await self._sentiment.snapshot(symbol)

    async def symbol_search(self, query: str) -> list[SymbolMatch]:
        """Merged, deduplicated matches from every configured provider."""

        providers = list(dict.fromkeys(self._resolver.providers))
        results = await asyncio.gather(*(self._search_one(provider, query) for provider in providers))
        return merge_matches(results, limit=self._settings.symbol_search_limit)

    async def _search_one(self, provider: str, query: str) -> list[SymbolMatch]:
        try:
            return await self._gateway.search_symbol(provider, query)
        except MarketDataError as exc:
            logger.warning("Symbol search via %s failed for %s: %s", provider, query, exc)
            return []

    async def prewarm(self) -> dict[str, int]:
        """Fill the gateway cache for overlays and the default watchlist, one symbol at a time."""

        lookback = self._settings.watchlist_lookback_days
        await _best_effort("Prewarm benchmark", self._benchmark(lookback))
        await _best_effort("Prewarm overlay", self._overlay(lookback))

        symbols = self._settings.default_watchlist
        warmed = 0
        for symbol in symbols:
            outcome = await _best_effort(
                f"Prewarm {symbol}",
                self._resolver.resolve(symbol, self._settings.watchlist_min_points, lookback),
            )
            if isinstance(outcome, Resolved):
                warmed += 1
        return {"warmed": warmed, "total": len(symbols)}


__all__ = ["DashboardService"]
