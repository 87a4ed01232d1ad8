"""Alpha Vantage client used by the market-data gateway."""

from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Any, Deque, Dict

import httpx

from pulseboard.config import get_settings

BASE_URL = "https://www.alphavantage.co/query"
_ERROR_KEYS = ("Note", "Information", "Error Message")


class AlphaVantageError(RuntimeError):
    """Raised when Alpha Vantage returns an error payload."""


class AlphaVantageClient:
    """Throttled Alpha Vantage client with convenience helpers.

    The free tier answers over-quota requests with HTTP 200 and a ``Note``
    or ``Information`` body, so both are surfaced as ``AlphaVantageError``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        requests_per_minute: int | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | Any | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.alphavantage_api_key
        self._requests_per_minute = requests_per_minute or settings.alphavantage_requests_per_minute
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient()
        self._calls: Deque[float] = deque()
        self._lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def _throttle(self) -> None:
        async with self._lock:
            now = time.monotonic()
            while self._calls and now - self._calls[0] >= 60:
                self._calls.popleft()
            if len(self._calls) >= self._requests_per_minute:
                wait = 60 - (now - self._calls[0])
                if wait > 0:
                    await asyncio.sleep(wait)
                self._calls.popleft()
            self._calls.append(time.monotonic())

    async def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self._api_key:
            raise AlphaVantageError("Alpha Vantage API key is not configured")
        await self._throttle()
        query = {**params, "apikey": self._api_key}
        try:
            response = await self._client.get(BASE_URL, params=query, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise AlphaVantageError(f"Alpha Vantage request failed: {exc}") from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise AlphaVantageError("Alpha Vantage returned invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise AlphaVantageError("Alpha Vantage returned a non-object payload")
        for key in _ERROR_KEYS:
            if payload.get(key):
                raise AlphaVantageError(str(payload[key]))
        return payload

    async def daily_series(self, symbol: str, output: str = "compact") -> Dict[str, Any]:
        """TIME_SERIES_DAILY; ``compact`` is ~100 days, ``full`` is 20+ years."""

        return await self._get({"function": "TIME_SERIES_DAILY", "symbol": symbol, "outputsize": output})

    async def global_quote(self, symbol: str) -> Dict[str, Any]:
        return await self._get({"function": "GLOBAL_QUOTE", "symbol": symbol})

    async def symbol_search(self, keywords: str) -> Dict[str, Any]:
        return await self._get({"function": "SYMBOL_SEARCH", "keywords": keywords})

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["AlphaVantageClient", "AlphaVantageError"]
