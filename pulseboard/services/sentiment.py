"""News and Reddit sentiment for a single symbol."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from pulseboard.config import AppSettings, get_settings
from pulseboard.errors import MarketDataError
from pulseboard.sentiment import SentimentScorer, get_default_scorer
from pulseboard.services.gateway import NEWS, REDDIT, MarketDataGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentimentSnapshot:
    news: Optional[float]
    reddit: Optional[float]


class SentimentService:
    """Scores text corpora from the gateway.

    A source that cannot be fetched yields ``None`` so callers can tell
    "no data" apart from a neutral 0.0 score.
    """

    def __init__(
        self,
        gateway: MarketDataGateway,
        settings: AppSettings | None = None,
        scorer: SentimentScorer | None = None,
    ) -> None:
        self._gateway = gateway
        self._settings = settings or get_settings()
        self._scorer = scorer or get_default_scorer()

    async def news_sentiment(self, symbol: str) -> float | None:
        try:
            texts = await self._gateway.fetch_text_corpus(NEWS, symbol, self._settings.sentiment_window_days)
        except MarketDataError as exc:
            logger.warning("News sentiment unavailable for %s: %s", symbol, exc)
            return None
        return self._scorer.aggregate(texts[: self._settings.news_text_cap])

    async def reddit_sentiment(self, symbol: str, name: str | None = None) -> float | None:
        window = self._settings.sentiment_window_days
        try:
            social = await self._gateway.fetch_social_score(symbol, window)
        except MarketDataError as exc:
            logger.info("Finnhub social score unavailable for %s, scoring Reddit titles: %s", symbol, exc)
            social = None
        if social is not None:
            return social

        try:
            titles = await self._gateway.fetch_text_corpus(REDDIT, symbol, window, hint=name)
        except MarketDataError as exc:
            logger.warning("Reddit sentiment unavailable for %s: %s", symbol, exc)
            return None
        return self._scorer.aggregate(titles)

    async def snapshot(self, symbol: str, name: str | None = None) -> SentimentSnapshot:
        news, reddit = await asyncio.gather(
            self.news_sentiment(symbol),
            self.reddit_sentiment(symbol, name),
        )
        return SentimentSnapshot(news=news, reddit=reddit)


__all__ = ["SentimentService", "SentimentSnapshot"]
