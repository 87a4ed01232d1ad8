"""Finnhub and Reddit client tests over a mocked transport."""

from __future__ import annotations

import httpx
import pytest

from pulseboard.providers.finnhub import FinnhubClient, FinnhubError
from pulseboard.providers.reddit import RedditClient, RedditError, build_search_query


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_finnhub_sends_token_and_candle_window():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"s": "ok", "c": [1.0], "t": [1704067200]})

    client = FinnhubClient(api_key="fh", client=_client(handler))
    payload = await client.candles("AAPL", 10)
    await client.aclose()

    params = seen[0].url.params
    assert seen[0].url.path == "/api/v1/stock/candle"
    assert params["token"] == "fh"
    assert params["resolution"] == "D"
    # short windows are widened to 30 days
    assert int(params["to"]) - int(params["from"]) == 30 * 86400
    assert payload["s"] == "ok"


@pytest.mark.asyncio
async def test_finnhub_http_error_carries_detail():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "You don't have access to this resource."})

    client = FinnhubClient(api_key="fh", client=_client(handler))
    with pytest.raises(FinnhubError, match="403"):
        await client.quote("ERIC-B.ST")


@pytest.mark.asyncio
async def test_finnhub_requires_key():
    client = FinnhubClient(api_key="", client=_client(lambda request: httpx.Response(200, json={})))
    assert not client.configured
    with pytest.raises(FinnhubError):
        await client.symbol_search("volvo")


def test_reddit_query_covers_ticker_variants_and_name():
    query = build_search_query("volv-b.st", "Volvo")

    assert query == 'VOLV-B.ST OR $VOLV-B.ST OR VOLV OR Volvo OR "Volvo stock"'


def test_reddit_query_without_name_dedupes():
    assert build_search_query("AAPL") == "AAPL OR $AAPL"


@pytest.mark.asyncio
async def test_reddit_sets_user_agent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"children": []}})

    client = RedditClient(user_agent="pulseboard-tests", client=_client(handler))
    await client.search("AAPL")

    assert seen[0].headers["User-Agent"] == "pulseboard-tests"
    assert seen[0].url.params["q"] == "AAPL OR $AAPL"


@pytest.mark.asyncio
async def test_reddit_error_status():
    client = RedditClient(client=_client(lambda request: httpx.Response(429)))
    with pytest.raises(RedditError):
        await client.search("AAPL")
