"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from pulseboard.config import AppSettings, get_settings
from pulseboard.services.dashboard import DashboardService
from pulseboard.services.gateway import HttpMarketDataGateway


def get_app_settings() -> AppSettings:
    return get_settings()


@lru_cache(maxsize=1)
def get_gateway() -> HttpMarketDataGateway:
    """Process-wide gateway so the TTL cache and throttle window are shared."""

    return HttpMarketDataGateway(get_settings())


def get_dashboard_service(
    gateway: HttpMarketDataGateway = Depends(get_gateway),
    settings: AppSettings = Depends(get_app_settings),
) -> DashboardService:
    return DashboardService(gateway, settings)


__all__ = ["get_app_settings", "get_dashboard_service", "get_gateway"]
