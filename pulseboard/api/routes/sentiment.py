from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from pulseboard.api.dependencies import get_dashboard_service
from pulseboard.schemas.dashboard import SentimentResponse
from pulseboard.services.dashboard import DashboardService

router = APIRouter()


@router.get("/{symbol}", response_model=SentimentResponse)
async def get_sentiment(
    symbol: str,
    service: DashboardService = Depends(get_dashboard_service),
) -> SentimentResponse:
    ticker = symbol.strip().upper()
    if not ticker:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Symbol is required")
    snapshot = await service.sentiment(ticker)
    return SentimentResponse(symbol=ticker, news=snapshot.news, reddit=snapshot.reddit)
