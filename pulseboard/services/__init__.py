"""Service layer: fetch gateway, resolution, charts, sentiment and orchestration."""

from .dashboard import DashboardService
from .gateway import HttpMarketDataGateway, MarketDataGateway
from .resolver import AttemptFailure, ResolutionFailure, Resolved, SeriesResolver

__all__ = [
    "AttemptFailure",
    "DashboardService",
    "HttpMarketDataGateway",
    "MarketDataGateway",
    "ResolutionFailure",
    "Resolved",
    "SeriesResolver",
]
