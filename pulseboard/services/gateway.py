"""Fetch capability consumed by the analytics core.

``MarketDataGateway`` is the seam the resolver, sentiment service and
orchestrator depend on. ``HttpMarketDataGateway`` implements it over the
provider clients: it validates every payload at the boundary, maps client
failures onto the ``MarketDataError`` taxonomy and caches results with a TTL
chosen per query shape.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Awaitable, Callable, Protocol, TypeVar

from pulseboard.config import AppSettings, get_settings
from pulseboard.errors import MarketDataError, NoData, ParseError, ProviderUnavailable
from pulseboard.models import Quote, Series, SymbolMatch
from pulseboard.providers.alpha_vantage import AlphaVantageClient, AlphaVantageError
from pulseboard.providers.finnhub import FinnhubClient, FinnhubError
from pulseboard.providers.reddit import RedditClient, RedditError
from pulseboard.schemas.providers import (
    AlphaVantageDailySeries,
    AlphaVantageGlobalQuote,
    AlphaVantageSymbolSearch,
    FinnhubCandles,
    FinnhubCompanyNews,
    FinnhubQuote,
    FinnhubSocialSentiment,
    FinnhubSymbolSearch,
    RedditListing,
    parse_payload,
)
from pulseboard.services.cache import TTLCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

FINNHUB = "finnhub"
ALPHA_VANTAGE = "alpha_vantage"
NEWS = "news"
REDDIT = "reddit"

# Alpha Vantage "compact" covers roughly 100 trading days
_COMPACT_MAX_DAYS = 120


class MarketDataGateway(Protocol):
    async def fetch_series(self, provider: str, symbol: str, window_days: int) -> Series: ...

    async def fetch_quote(self, provider: str, symbol: str) -> Quote: ...

    async def search_symbol(self, provider: str, query: str) -> list[SymbolMatch]: ...

    async def fetch_text_corpus(
        self, source: str, symbol: str, window_days: int, *, hint: str | None = None
    ) -> list[str]: ...

    async def fetch_social_score(self, symbol: str, window_days: int) -> float | None: ...


class HttpMarketDataGateway:
    """Provider-backed implementation of :class:`MarketDataGateway`."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        alpha_vantage: AlphaVantageClient | None = None,
        finnhub: FinnhubClient | None = None,
        reddit: RedditClient | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._alpha = alpha_vantage or AlphaVantageClient(
            self._settings.alphavantage_api_key,
            requests_per_minute=self._settings.alphavantage_requests_per_minute,
            timeout_seconds=self._settings.http_timeout_seconds,
        )
        self._finnhub = finnhub or FinnhubClient(
            self._settings.finnhub_api_key,
            timeout_seconds=self._settings.http_timeout_seconds,
        )
        self._reddit = reddit or RedditClient(
            user_agent=self._settings.reddit_user_agent,
            timeout_seconds=self._settings.http_timeout_seconds,
        )
        self._cache = cache if cache is not None else TTLCache(max_entries=self._settings.cache_max_entries)

    async def _cached(self, key: tuple[Any, ...], ttl: int, loader: Callable[[], Awaitable[T]]) -> T:
        return await self._cache.get_or_load(key, ttl, loader)

    async def _call(self, provider: str, symbol: str, request: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await request()
        except (AlphaVantageError, FinnhubError, RedditError) as exc:
            logger.debug("%s request for %s failed: %s", provider, symbol, exc)
            raise ProviderUnavailable(str(exc), provider=provider, symbol=symbol) from exc

    def _series_ttl(self, window_days: int) -> int:
        if window_days > self._settings.deep_series_threshold_days:
            return self._settings.deep_series_cache_ttl_seconds
        return self._settings.series_cache_ttl_seconds

    async def fetch_series(self, provider: str, symbol: str, window_days: int) -> Series:
        async def load() -> Series:
            if provider == FINNHUB:
                payload = await self._call(provider, symbol, lambda: self._finnhub.candles(symbol, window_days))
                return parse_payload(FinnhubCandles, payload, provider=provider, symbol=symbol).to_series(
                    symbol, provider
                )
            if provider == ALPHA_VANTAGE:
                output = "compact" if window_days <= _COMPACT_MAX_DAYS else "full"
                payload = await self._call(provider, symbol, lambda: self._alpha.daily_series(symbol, output))
                start = (date.today() - timedelta(days=window_days)).isoformat()
                return parse_payload(AlphaVantageDailySeries, payload, provider=provider, symbol=symbol).to_series(
                    symbol, provider, start=start
                )
            raise ProviderUnavailable(f"Unknown series provider {provider!r}", provider=provider, symbol=symbol)

        return await self._cached(("series", provider, symbol, window_days), self._series_ttl(window_days), load)

    async def fetch_quote(self, provider: str, symbol: str) -> Quote:
        async def load() -> Quote:
            if provider == FINNHUB:
                payload = await self._call(provider, symbol, lambda: self._finnhub.quote(symbol))
                return parse_payload(FinnhubQuote, payload, provider=provider, symbol=symbol).to_quote(symbol, provider)
            if provider == ALPHA_VANTAGE:
                payload = await self._call(provider, symbol, lambda: self._alpha.global_quote(symbol))
                return parse_payload(AlphaVantageGlobalQuote, payload, provider=provider, symbol=symbol).to_quote(
                    symbol, provider
                )
            raise ProviderUnavailable(f"Unknown quote provider {provider!r}", provider=provider, symbol=symbol)

        return await self._cached(("quote", provider, symbol), self._settings.quote_cache_ttl_seconds, load)

    async def search_symbol(self, provider: str, query: str) -> list[SymbolMatch]:
        async def load() -> list[SymbolMatch]:
            if provider == FINNHUB:
                payload = await self._call(provider, query, lambda: self._finnhub.symbol_search(query))
                return parse_payload(FinnhubSymbolSearch, payload, provider=provider, symbol=query).to_matches()
            if provider == ALPHA_VANTAGE:
                payload = await self._call(provider, query, lambda: self._alpha.symbol_search(query))
                return parse_payload(AlphaVantageSymbolSearch, payload, provider=provider, symbol=query).to_matches()
            raise ProviderUnavailable(f"Unknown search provider {provider!r}", provider=provider, symbol=query)

        return await self._cached(("search", provider, query.upper()), self._settings.search_cache_ttl_seconds, load)

    async def fetch_text_corpus(
        self, source: str, symbol: str, window_days: int, *, hint: str | None = None
    ) -> list[str]:
        async def load() -> list[str]:
            if source == NEWS:
                payload = await self._call(FINNHUB, symbol, lambda: self._finnhub.company_news(symbol, window_days))
                return parse_payload(FinnhubCompanyNews, payload, provider=FINNHUB, symbol=symbol).texts()
            if source == REDDIT:
                payload = await self._call(REDDIT, symbol, lambda: self._reddit.search(symbol, name=hint))
                return parse_payload(RedditListing, payload, provider=REDDIT, symbol=symbol).titles()
            raise ProviderUnavailable(f"Unknown text source {source!r}", provider=source, symbol=symbol)

        return await self._cached(
            ("corpus", source, symbol, window_days, hint), self._settings.news_cache_ttl_seconds, load
        )

    async def fetch_social_score(self, symbol: str, window_days: int) -> float | None:
        """Mean Finnhub Reddit score in [-1, 1], or ``None`` when Finnhub has nothing."""

        async def load() -> float | None:
            payload = await self._call(FINNHUB, symbol, lambda: self._finnhub.social_sentiment(symbol, window_days))
            scores = parse_payload(FinnhubSocialSentiment, payload, provider=FINNHUB, symbol=symbol).reddit_scores()
            if not scores:
                return None
            return max(-1.0, min(1.0, round(sum(scores) / len(scores), 2)))

        return await self._cached(("social", symbol, window_days), self._settings.social_cache_ttl_seconds, load)

    async def aclose(self) -> None:
        for client in (self._alpha, self._finnhub, self._reddit):
            await client.aclose()


def describe_failure(exc: MarketDataError) -> str:
    """Short reason tag for diagnostics and logs."""

    if isinstance(exc, ParseError):
        kind = "parse_error"
    elif isinstance(exc, NoData):
        kind = "no_data"
    elif isinstance(exc, ProviderUnavailable):
        kind = "provider_unavailable"
    else:
        kind = type(exc).__name__
    return f"{kind}: {exc}"


__all__ = [
    "ALPHA_VANTAGE",
    "FINNHUB",
    "HttpMarketDataGateway",
    "MarketDataGateway",
    "NEWS",
    "REDDIT",
    "describe_failure",
]
