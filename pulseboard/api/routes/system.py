"""Cache prewarming and provider diagnostics."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from pulseboard.api.dependencies import get_app_settings, get_dashboard_service
from pulseboard.config import AppSettings
from pulseboard.schemas.system import DiagResponse, PrewarmResponse
from pulseboard.services.dashboard import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/prewarm", response_model=PrewarmResponse)
async def prewarm(service: DashboardService = Depends(get_dashboard_service)) -> PrewarmResponse:
    result = await service.prewarm()
    logger.info("Prewarmed %d of %d watchlist symbols", result["warmed"], result["total"])
    return PrewarmResponse(**result)


@router.get("/diag", response_model=DiagResponse)
async def diag(settings: AppSettings = Depends(get_app_settings)) -> DiagResponse:
    return DiagResponse(
        finnhub_key_present=bool(settings.finnhub_api_key),
        alpha_vantage_key_present=bool(settings.alphavantage_api_key),
        primary_provider=settings.primary_provider,
        secondary_provider=settings.secondary_provider,
    )
