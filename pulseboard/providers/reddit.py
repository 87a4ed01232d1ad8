"""Reddit public search client (titles only)."""

from __future__ import annotations

import re
from typing import Any

import httpx

from pulseboard.config import get_settings

SEARCH_URL = "https://www.reddit.com/search.json"
_VENUE_SUFFIX = re.compile(r"\.[A-Z]+$", re.IGNORECASE)
_CLASS_SUFFIX = re.compile(r"-[A-Z]+$", re.IGNORECASE)


class RedditError(RuntimeError):
    """Raised when Reddit search cannot be reached or answers with an error."""


def build_search_query(symbol: str, name: str | None = None) -> str:
    """OR-joined query over the ticker, its cashtag, its bare form and the company name."""

    upper = symbol.upper()
    bare = _CLASS_SUFFIX.sub("", _VENUE_SUFFIX.sub("", upper))
    terms = [upper, f"${upper}", bare]
    if name and len(name.strip()) > 1:
        terms += [name.strip(), f"{name.strip()} stock"]

    seen: list[str] = []
    for term in terms:
        if term not in seen:
            seen.append(term)
    return " OR ".join(f'"{term}"' if " " in term else term for term in seen)


class RedditClient:
    def __init__(
        self,
        *,
        user_agent: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | Any | None = None,
    ) -> None:
        settings = get_settings()
        self._user_agent = user_agent or settings.reddit_user_agent
        self._timeout = timeout_seconds or settings.http_timeout_seconds
        self._client = client or httpx.AsyncClient()

    async def search(self, symbol: str, *, name: str | None = None, limit: int = 50) -> Any:
        params = {"q": build_search_query(symbol, name), "sort": "new", "t": "month", "limit": limit}
        try:
            response = await self._client.get(
                SEARCH_URL,
                params=params,
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise RedditError(f"Failed to reach Reddit: {exc}") from exc
        if response.status_code >= 400:
            raise RedditError(f"Reddit search error {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise RedditError("Reddit returned invalid JSON payload") from exc

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["RedditClient", "RedditError", "build_search_query"]
