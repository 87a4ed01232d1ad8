import asyncio
import inspect
import pathlib
import sys
from datetime import date, timedelta
from typing import Callable, Sequence

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pulseboard.config import AppSettings  # noqa: E402
from pulseboard.errors import NoData  # noqa: E402
from pulseboard.models import PricePoint, Quote, Series, SymbolMatch  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        kwargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


def build_series(
    symbol: str,
    provider: str,
    closes: Sequence[float],
    *,
    start: str = "2024-01-01",
    volumes: Sequence[float] | None = None,
) -> Series:
    first = date.fromisoformat(start)
    points = [
        PricePoint(
            date=(first + timedelta(days=offset)).isoformat(),
            close=float(close),
            volume=None if volumes is None else float(volumes[offset]),
        )
        for offset, close in enumerate(closes)
    ]
    return Series(symbol=symbol, provider=provider, points=tuple(points))


class FakeGateway:
    """In-memory gateway; values may be exceptions to raise."""

    def __init__(self) -> None:
        self.series: dict[tuple[str, str], object] = {}
        self.quotes: dict[tuple[str, str], object] = {}
        self.searches: dict[tuple[str, str], object] = {}
        self.corpora: dict[tuple[str, str], object] = {}
        self.social: dict[str, object] = {}
        self.calls: list[tuple[str, ...]] = []

    @staticmethod
    def _unwrap(value: object) -> object:
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_series(self, provider: str, symbol: str, window_days: int) -> Series:
        self.calls.append(("series", provider, symbol))
        if (provider, symbol) not in self.series:
            raise NoData("no series", provider=provider, symbol=symbol)
        return self._unwrap(self.series[(provider, symbol)])

    async def fetch_quote(self, provider: str, symbol: str) -> Quote:
        self.calls.append(("quote", provider, symbol))
        if (provider, symbol) not in self.quotes:
            raise NoData("no quote", provider=provider, symbol=symbol)
        return self._unwrap(self.quotes[(provider, symbol)])

    async def search_symbol(self, provider: str, query: str) -> list[SymbolMatch]:
        self.calls.append(("search", provider, query))
        return self._unwrap(self.searches.get((provider, query), []))

    async def fetch_text_corpus(self, source: str, symbol: str, window_days: int, *, hint: str | None = None) -> list[str]:
        self.calls.append(("corpus", source, symbol))
        return self._unwrap(self.corpora.get((source, symbol), []))

    async def fetch_social_score(self, symbol: str, window_days: int) -> float | None:
        self.calls.append(("social", symbol))
        return self._unwrap(self.social.get(symbol))

    def series_calls(self) -> list[tuple[str, str]]:
        return [(call[1], call[2]) for call in self.calls if call[0] == "series"]


@pytest.fixture
def make_series() -> Callable[..., Series]:
    return build_series


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        finnhub_api_key="fh-test",
        alphavantage_api_key="av-test",
        telemetry_enabled=False,
    )
