"""Validated shapes of upstream provider payloads.

The provider clients hand raw JSON to these models; only the converted
domain objects travel further. A payload that does not fit its model is a
``ParseError``, one that fits but carries nothing usable is ``NoData``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Iterable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, RootModel, ValidationError, field_validator, model_validator

from pulseboard.errors import NoData, ParseError
from pulseboard.models import PricePoint, Quote, Series, SymbolMatch

ModelT = TypeVar("ModelT", bound=BaseModel)

IsoDay = Annotated[str, Field(pattern=r"^\d{4}-\d{2}-\d{2}$")]
Volume = Annotated[float, Field(ge=0)]


class ProviderPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)


def parse_payload(model: type[ModelT], payload: Any, *, provider: str, symbol: str | None = None) -> ModelT:
    """Validate ``payload`` against ``model`` or raise ``ParseError``."""

    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(
            f"{provider} payload did not match {model.__name__}: {exc.error_count()} error(s)",
            provider=provider,
            symbol=symbol,
        ) from exc


def _iso_day(timestamp: int | float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()


def _build_series(symbol: str, provider: str, rows: Iterable[tuple[str, float, Optional[float]]]) -> Series:
    """Turn validated rows into a ``Series``; domain rule violations are parse errors."""

    try:
        points = [PricePoint(date=day, close=close, volume=volume) for day, close, volume in rows]
        if not points:
            raise NoData(f"No usable bars for {symbol}", provider=provider, symbol=symbol)
        return Series.from_points(symbol, provider, points)
    except ValueError as exc:
        raise ParseError(f"{provider} bars for {symbol} are invalid: {exc}", provider=provider, symbol=symbol) from exc


# Alpha Vantage


class AlphaVantageDailyBar(ProviderPayload):
    close: float = Field(alias="4. close", gt=0)
    volume: Optional[float] = Field(default=None, alias="5. volume", ge=0)


class AlphaVantageDailySeries(ProviderPayload):
    series: dict[IsoDay, AlphaVantageDailyBar] = Field(default_factory=dict, alias="Time Series (Daily)")

    def to_series(self, symbol: str, provider: str, *, start: str | None = None) -> Series:
        return _build_series(
            symbol,
            provider,
            ((day, bar.close, bar.volume) for day, bar in self.series.items() if start is None or day >= start),
        )


class AlphaVantageQuoteBody(ProviderPayload):
    symbol: Optional[str] = Field(default=None, alias="01. symbol")
    price: Optional[float] = Field(default=None, alias="05. price")
    change_percent: Optional[float] = Field(default=None, alias="10. change percent")

    @field_validator("change_percent", mode="before")
    @classmethod
    def _strip_percent(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().rstrip("%") or None
        return value


class AlphaVantageGlobalQuote(ProviderPayload):
    quote: AlphaVantageQuoteBody = Field(default_factory=AlphaVantageQuoteBody, alias="Global Quote")

    def to_quote(self, symbol: str, provider: str) -> Quote:
        body = self.quote
        if body.price is None or body.price <= 0:
            raise NoData(f"Empty global quote for {symbol}", provider=provider, symbol=symbol)
        return Quote(
            symbol=(body.symbol or symbol).upper(),
            last=body.price,
            change_pct=body.change_percent or 0.0,
            provider=provider,
        )


class AlphaVantageMatch(ProviderPayload):
    symbol: str = Field(alias="1. symbol")
    name: str = Field(default="", alias="2. name")
    region: Optional[str] = Field(default=None, alias="4. region")
    currency: Optional[str] = Field(default=None, alias="8. currency")


class AlphaVantageSymbolSearch(ProviderPayload):
    best_matches: list[AlphaVantageMatch] = Field(default_factory=list, alias="bestMatches")

    def to_matches(self) -> list[SymbolMatch]:
        return [
            SymbolMatch(symbol=m.symbol.strip().upper(), name=m.name or m.symbol, region=m.region, currency=m.currency)
            for m in self.best_matches
            if m.symbol.strip()
        ]


# Finnhub


class FinnhubCandles(ProviderPayload):
    status: str = Field(alias="s")
    closes: list[float] = Field(default_factory=list, alias="c")
    timestamps: list[int] = Field(default_factory=list, alias="t")
    volumes: Optional[list[Volume]] = Field(default=None, alias="v")

    @model_validator(mode="after")
    def _check_lengths(self) -> "FinnhubCandles":
        if len(self.closes) != len(self.timestamps):
            raise ValueError("close and timestamp arrays differ in length")
        if self.volumes is not None and len(self.volumes) != len(self.closes):
            raise ValueError("volume and close arrays differ in length")
        return self

    def to_series(self, symbol: str, provider: str) -> Series:
        if self.status != "ok" or not self.closes:
            raise NoData(f"Finnhub returned status {self.status!r} for {symbol}", provider=provider, symbol=symbol)
        volumes = self.volumes or [None] * len(self.closes)
        return _build_series(
            symbol,
            provider,
            (
                (_iso_day(ts), close, volume)
                for close, ts, volume in zip(self.closes, self.timestamps, volumes)
                if close > 0
            ),
        )


class FinnhubQuote(ProviderPayload):
    current: float = Field(default=0.0, alias="c")
    change_percent: Optional[float] = Field(default=None, alias="dp")
    previous_close: float = Field(default=0.0, alias="pc")

    def to_quote(self, symbol: str, provider: str) -> Quote:
        # Finnhub answers unknown symbols with an all-zero quote
        if self.current <= 0:
            raise NoData(f"Empty quote for {symbol}", provider=provider, symbol=symbol)
        change_pct = self.change_percent
        if change_pct is None:
            change_pct = (
                (self.current - self.previous_close) / self.previous_close * 100 if self.previous_close > 0 else 0.0
            )
        return Quote(symbol=symbol.upper(), last=self.current, change_pct=change_pct, provider=provider)


class FinnhubSearchItem(ProviderPayload):
    symbol: str = ""
    display_symbol: Optional[str] = Field(default=None, alias="displaySymbol")
    description: str = ""


class FinnhubSymbolSearch(ProviderPayload):
    result: list[FinnhubSearchItem] = Field(default_factory=list)

    def to_matches(self) -> list[SymbolMatch]:
        matches: list[SymbolMatch] = []
        for item in self.result:
            symbol = (item.symbol or item.display_symbol or "").strip().upper()
            if symbol:
                matches.append(SymbolMatch(symbol=symbol, name=item.description or symbol))
        return matches


class FinnhubNewsItem(ProviderPayload):
    headline: Optional[str] = None
    summary: Optional[str] = None
    published: Optional[int] = Field(default=None, alias="datetime")
    source: Optional[str] = None


class FinnhubCompanyNews(RootModel[list[FinnhubNewsItem]]):
    def texts(self) -> list[str]:
        """Headlines and summaries, both scored as separate texts."""

        texts: list[str] = []
        for item in self.root:
            for text in (item.headline, item.summary):
                if text and text.strip():
                    texts.append(text.strip())
        return texts


class FinnhubSocialEntry(ProviderPayload):
    at_time: Optional[str] = Field(default=None, alias="atTime")
    mention: Optional[int] = None
    score: Optional[float] = None


class FinnhubSocialSentiment(ProviderPayload):
    symbol: Optional[str] = None
    reddit: list[FinnhubSocialEntry] = Field(default_factory=list)

    def reddit_scores(self) -> list[float]:
        return [entry.score for entry in self.reddit if entry.score is not None]


# Reddit


class RedditPostData(ProviderPayload):
    title: str = ""


class RedditChild(ProviderPayload):
    data: RedditPostData = Field(default_factory=RedditPostData)


class RedditListingData(ProviderPayload):
    children: list[RedditChild] = Field(default_factory=list)


class RedditListing(ProviderPayload):
    data: RedditListingData = Field(default_factory=RedditListingData)

    def titles(self) -> list[str]:
        return [child.data.title.strip() for child in self.data.children if child.data.title.strip()]


__all__ = [
    "AlphaVantageDailySeries",
    "AlphaVantageGlobalQuote",
    "AlphaVantageSymbolSearch",
    "FinnhubCandles",
    "FinnhubCompanyNews",
    "FinnhubNewsItem",
    "FinnhubQuote",
    "FinnhubSocialSentiment",
    "FinnhubSymbolSearch",
    "RedditListing",
    "parse_payload",
]
