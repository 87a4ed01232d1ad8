"""Client helpers for the Finnhub REST API."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import httpx

from pulseboard.config import get_settings

BASE_URL = "https://finnhub.io/api/v1"


class FinnhubError(RuntimeError):
    """Raised when Finnhub cannot be reached or answers with an error."""


class FinnhubClient:
    """Thin async wrapper over the Finnhub endpoints the dashboard reads."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str = BASE_URL,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | Any | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.finnhub_api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        if not self._api_key:
            raise FinnhubError("Finnhub API key is not configured")
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params={**params, "token": self._api_key}, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise FinnhubError(f"Failed to reach Finnhub: {exc}") from exc

        if response.status_code >= 400:
            detail: Any
            try:
                payload = response.json()
                detail = payload.get("error", payload) if isinstance(payload, dict) else payload
            except ValueError:
                detail = response.text
            raise FinnhubError(f"Finnhub error {response.status_code}: {detail}")

        try:
            return response.json()
        except ValueError as exc:
            raise FinnhubError("Finnhub returned invalid JSON payload") from exc

    async def candles(self, symbol: str, days_back: int) -> Any:
        """Daily candles covering the last ``days_back`` calendar days (at least 30)."""

        to_ts = int(datetime.now(tz=timezone.utc).timestamp())
        from_ts = to_ts - max(30, days_back) * 86400
        return await self._get(
            "/stock/candle",
            {"symbol": symbol, "resolution": "D", "from": from_ts, "to": to_ts},
        )

    async def quote(self, symbol: str) -> Any:
        return await self._get("/quote", {"symbol": symbol})

    async def symbol_search(self, query: str) -> Any:
        return await self._get("/search", {"q": query})

    async def company_news(self, symbol: str, days_back: int) -> Any:
        start, end = _date_window(days_back)
        return await self._get("/company-news", {"symbol": symbol, "from": start, "to": end})

    async def social_sentiment(self, symbol: str, days_back: int) -> Any:
        start, end = _date_window(days_back)
        return await self._get("/stock/social-sentiment", {"symbol": symbol, "from": start, "to": end})

    async def aclose(self) -> None:
        await self._client.aclose()


def _date_window(days_back: int) -> tuple[str, str]:
    end = date.today()
    start = end - timedelta(days=days_back)
    return start.isoformat(), end.isoformat()


__all__ = ["FinnhubClient", "FinnhubError"]
