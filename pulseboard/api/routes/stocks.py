"""Single-symbol detail endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pulseboard.api.dependencies import get_dashboard_service
from pulseboard.schemas.dashboard import DetailResponse
from pulseboard.services.charts import normalize_range
from pulseboard.services.dashboard import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{symbol}", response_model=DetailResponse)
async def get_stock_detail(
    symbol: str,
    chart_range: str = Query(default="1Y", alias="range", description="One of 1M, 6M, 1Y, 5Y, MAX"),
    service: DashboardService = Depends(get_dashboard_service),
) -> DetailResponse:
    ticker = symbol.strip().upper()
    if not ticker:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Symbol is required")
    try:
        chart_range = normalize_range(chart_range)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = await service.build_detail(ticker, chart_range)
    if result.row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No market data available for {ticker}")
    return DetailResponse.from_domain(result, chart_range)
