"""Multi-provider series resolution with ordered fallback."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import AsyncIterator, Iterable, Sequence

from pulseboard.config import AppSettings, get_settings
from pulseboard.errors import InsufficientHistory, MarketDataError
from pulseboard.models import Series, SymbolMatch
from pulseboard.services.gateway import MarketDataGateway, describe_failure

logger = logging.getLogger(__name__)

_VENUE_SUFFIX = re.compile(r"\.[A-Z]{1,4}$", re.IGNORECASE)


@dataclass(frozen=True)
class AttemptFailure:
    provider: str
    symbol: str
    reason: str


@dataclass(frozen=True)
class Resolved:
    """A series that met the caller's minimum length, tagged with its source."""

    series: Series
    provider: str
    symbol: str
    attempts: tuple[AttemptFailure, ...] = ()


@dataclass(frozen=True)
class ResolutionFailure:
    """Every attempt for ``symbol`` failed; distinct from an empty series."""

    symbol: str
    attempts: tuple[AttemptFailure, ...] = ()


def has_venue_suffix(symbol: str) -> bool:
    return bool(_VENUE_SUFFIX.search(symbol))


def base_symbol(symbol: str) -> str:
    return _VENUE_SUFFIX.sub("", symbol.upper())


def merge_matches(results: Iterable[Sequence[SymbolMatch]], *, limit: int | None = None) -> list[SymbolMatch]:
    """Concatenate provider search results keeping the first match per symbol."""

    merged: list[SymbolMatch] = []
    seen: set[str] = set()
    for matches in results:
        for match in matches:
            key = match.symbol.upper()
            if not key or key in seen:
                continue
            seen.add(key)
            merged.append(match)
    return merged[:limit] if limit is not None else merged


class SeriesResolver:
    """Runs an ordered list of ``(provider, symbol)`` attempts until one succeeds.

    The default chain is: the primary provider for the symbol as given, the
    secondary provider, then a symbol search restricted to the preferred
    exchange suffix whose best match is retried on the secondary and then
    the primary provider. Venue-suffixed tickers and volume-sensitive
    requests swap the first two steps. The search only runs when the chain
    gets that far.
    """

    def __init__(self, gateway: MarketDataGateway, settings: AppSettings | None = None) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()

    @property
    def providers(self) -> tuple[str, str]:
        return self._settings.primary_provider, self._settings.secondary_provider

    def provider_order(self, symbol: str, *, require_volume: bool = False) -> tuple[str, str]:
        primary, secondary = self.providers
        if require_volume or has_venue_suffix(symbol):
            return secondary, primary
        return primary, secondary

    async def search_preferred(self, query: str) -> list[SymbolMatch]:
        """Merged search results across providers, limited to the preferred suffix."""

        suffix = self._settings.preferred_exchange_suffix.upper()
        results: list[list[SymbolMatch]] = []
        for provider in dict.fromkeys(self.providers):
            try:
                results.append(await self._gateway.search_symbol(provider, query))
            except MarketDataError as exc:
                logger.warning("Symbol search via %s failed for %s: %s", provider, query, exc)
        return [m for m in merge_matches(results) if m.symbol.upper().endswith(suffix)]

    async def best_preferred_match(self, symbol: str) -> str | None:
        query = base_symbol(symbol)
        matches = await self.search_preferred(query)
        if not matches:
            return None
        for match in matches:
            if base_symbol(match.symbol) == query:
                return match.symbol
        return matches[0].symbol

    async def _attempts(
        self, symbol: str, *, require_volume: bool, allow_search: bool
    ) -> AsyncIterator[tuple[str, str]]:
        first, second = self.provider_order(symbol, require_volume=require_volume)
        yield first, symbol
        yield second, symbol
        if not allow_search:
            return
        match = await self.best_preferred_match(symbol)
        if match is None or match.upper() == symbol.upper():
            return
        primary, secondary = self.providers
        yield secondary, match
        yield primary, match

    async def _attempt(self, provider: str, symbol: str, min_viable_points: int, max_lookback_days: int) -> Series:
        series = await self._gateway.fetch_series(provider, symbol, max_lookback_days)
        if len(series) < min_viable_points:
            raise InsufficientHistory(
                f"{len(series)} points, need {min_viable_points}",
                provider=provider,
                symbol=symbol,
            )
        return series

    async def resolve(
        self,
        symbol: str,
        min_viable_points: int,
        max_lookback_days: int,
        *,
        require_volume: bool = False,
        allow_search: bool = True,
    ) -> Resolved | ResolutionFailure:
        failures: list[AttemptFailure] = []
        attempts = self._attempts(symbol, require_volume=require_volume, allow_search=allow_search)
        async for provider, candidate in attempts:
            try:
                series = await self._attempt(provider, candidate, min_viable_points, max_lookback_days)
            except MarketDataError as exc:
                logger.warning("Series attempt %s/%s failed: %s", provider, candidate, exc)
                failures.append(AttemptFailure(provider=provider, symbol=candidate, reason=describe_failure(exc)))
                continue
            await attempts.aclose()
            return Resolved(
                series=replace(series, requested_symbol=symbol),
                provider=provider,
                symbol=candidate,
                attempts=tuple(failures),
            )
        return ResolutionFailure(symbol=symbol, attempts=tuple(failures))

    async def resolve_first(
        self,
        candidates: Sequence[str],
        min_viable_points: int,
        max_lookback_days: int,
    ) -> Resolved | ResolutionFailure:
        """Resolve the first candidate symbol that any provider can serve."""

        failures: list[AttemptFailure] = []
        for candidate in candidates:
            outcome = await self.resolve(candidate, min_viable_points, max_lookback_days, allow_search=False)
            if isinstance(outcome, Resolved):
                return replace(outcome, attempts=tuple(failures) + outcome.attempts)
            failures.extend(outcome.attempts)
        label = candidates[0] if candidates else ""
        return ResolutionFailure(symbol=label, attempts=tuple(failures))


__all__ = [
    "AttemptFailure",
    "ResolutionFailure",
    "Resolved",
    "SeriesResolver",
    "base_symbol",
    "has_venue_suffix",
    "merge_matches",
]
