"""HTTP API tests over an in-memory gateway."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pulseboard.api.dependencies import get_app_settings, get_dashboard_service
from pulseboard.api.routes import api_router
from pulseboard.api.routes.watchlist import parse_symbols
from pulseboard.models import Quote, SymbolMatch
from pulseboard.services.dashboard import DashboardService


@pytest.fixture
def app(fake_gateway, make_series, settings) -> FastAPI:
    fake_gateway.series[("finnhub", "SPY")] = make_series("SPY", "finnhub", [400.0 + i for i in range(260)])
    fake_gateway.series[("finnhub", "AAPL")] = make_series("AAPL", "finnhub", [150.0 + i for i in range(260)])
    fake_gateway.series[("alpha_vantage", "AAPL")] = make_series(
        "AAPL", "alpha_vantage", [150.0 + i for i in range(260)], volumes=[10.0] * 260
    )
    fake_gateway.quotes[("finnhub", "QONLY")] = Quote(symbol="QONLY", last=9.5, change_pct=2.0, provider="finnhub")
    fake_gateway.searches[("finnhub", "apple")] = [SymbolMatch(symbol="AAPL", name="Apple Inc")]
    fake_gateway.corpora[("news", "AAPL")] = ["Apple beats estimates"]

    application = FastAPI()
    application.include_router(api_router)
    application.dependency_overrides[get_dashboard_service] = lambda: DashboardService(fake_gateway, settings)
    application.dependency_overrides[get_app_settings] = lambda: settings
    return application


async def _get(app: FastAPI, path: str, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(kwargs.pop("method", "GET"), path, **kwargs)


def test_parse_symbols():
    assert parse_symbols(" aapl, ,msft,AAPL ", ["X"]) == ["AAPL", "MSFT"]
    assert parse_symbols(None, ["X"]) == ["X"]
    assert parse_symbols(" , ", ["X"]) == []


@pytest.mark.asyncio
async def test_watchlist_reports_live_and_total_counts(app):
    response = await _get(app, "/watchlist", params={"symbols": "AAPL,QONLY,GHOST"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_count"] == 3
    assert payload["live_count"] == 1
    assert payload["degraded_count"] == 1
    assert payload["dropped_count"] == 1
    rows = {row["symbol"]: row for row in payload["rows"]}
    assert rows["AAPL"]["live"] is True
    assert rows["AAPL"]["indicators"]["sma200"] is not None
    assert rows["QONLY"]["live"] is False
    assert rows["QONLY"]["indicators"]["rsi14"] is None


@pytest.mark.asyncio
async def test_watchlist_rejects_empty_symbol_list(app):
    response = await _get(app, "/watchlist", params={"symbols": " , "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_stock_detail_includes_chart(app):
    response = await _get(app, "/stocks/aapl", params={"range": "1M"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["range"] == "1M"
    assert payload["row"]["symbol"] == "AAPL"
    assert payload["chart"]["points"][0]["stock"] == 100.0
    assert payload["chart"]["overlays_included"] == ["spy"]


@pytest.mark.asyncio
async def test_stock_detail_not_found(app):
    response = await _get(app, "/stocks/GHOST")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stock_detail_bad_range(app):
    response = await _get(app, "/stocks/AAPL", params={"range": "2W"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_sentiment_endpoint(app):
    response = await _get(app, "/sentiment/aapl")

    assert response.status_code == 200
    payload = response.json()
    assert payload["symbol"] == "AAPL"
    assert payload["news"] > 0
    assert payload["reddit"] == 0.0


@pytest.mark.asyncio
async def test_symbol_search(app):
    response = await _get(app, "/symbols/search", params={"q": "apple"})

    assert response.status_code == 200
    assert response.json() == {
        "symbols": [{"symbol": "AAPL", "name": "Apple Inc", "region": None, "currency": None}]
    }


@pytest.mark.asyncio
async def test_prewarm_and_diag(app, settings):
    response = await _get(app, "/prewarm", method="POST")
    assert response.status_code == 200
    assert response.json()["total"] == len(settings.default_watchlist)
    assert response.json()["warmed"] == 1

    response = await _get(app, "/diag")
    assert response.json() == {
        "finnhub_key_present": True,
        "alpha_vantage_key_present": True,
        "primary_provider": "finnhub",
        "secondary_provider": "alpha_vantage",
    }


@pytest.mark.asyncio
async def test_health_on_the_assembled_app():
    from pulseboard.main import app as main_app

    response = await _get(main_app, "/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
