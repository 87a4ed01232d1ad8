"""Symbol search endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from pulseboard.api.dependencies import get_dashboard_service
from pulseboard.schemas.symbols import SymbolSearchResponse, SymbolSearchResultSchema
from pulseboard.services.dashboard import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=SymbolSearchResponse)
async def search_symbols(
    q: str = Query(..., min_length=1, max_length=32, description="Ticker or company keywords"),
    service: DashboardService = Depends(get_dashboard_service),
) -> SymbolSearchResponse:
    query = q.strip()
    matches = await service.symbol_search(query) if query else []
    logger.info("Returning %d symbol matches for query: %s", len(matches), query)
    return SymbolSearchResponse(
        symbols=[
            SymbolSearchResultSchema(
                symbol=match.symbol,
                name=match.name,
                region=match.region,
                currency=match.currency,
            )
            for match in matches
        ]
    )
