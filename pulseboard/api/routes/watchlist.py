"""Watchlist endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pulseboard.api.dependencies import get_app_settings, get_dashboard_service
from pulseboard.config import AppSettings
from pulseboard.schemas.dashboard import WatchlistResponse
from pulseboard.services.dashboard import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_SYMBOLS = 50


def parse_symbols(raw: str | None, default: list[str]) -> list[str]:
    """Split a comma-separated symbol list, uppercasing and dropping blanks and repeats."""

    if raw is None:
        return list(default)
    symbols: list[str] = []
    for part in raw.split(","):
        symbol = part.strip().upper()
        if symbol and symbol not in symbols:
            symbols.append(symbol)
    return symbols


@router.get("", response_model=WatchlistResponse)
async def get_watchlist(
    symbols: str | None = Query(default=None, description="Comma-separated tickers; defaults to the configured list"),
    service: DashboardService = Depends(get_dashboard_service),
    settings: AppSettings = Depends(get_app_settings),
) -> WatchlistResponse:
    requested = parse_symbols(symbols, settings.default_watchlist)
    if not requested:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No symbols requested")
    if len(requested) > MAX_SYMBOLS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_SYMBOLS} symbols per request",
        )
    logger.info("Building watchlist for %d symbols", len(requested))
    result = await service.build_watchlist_rows(requested)
    return WatchlistResponse.from_domain(result)
