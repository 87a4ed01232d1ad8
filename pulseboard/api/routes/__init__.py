"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from .sentiment import router as sentiment_router
from .stocks import router as stocks_router
from .symbols import router as symbols_router
from .system import router as system_router
from .watchlist import router as watchlist_router

api_router = APIRouter()
api_router.include_router(watchlist_router, prefix="/watchlist", tags=["watchlist"])
api_router.include_router(stocks_router, prefix="/stocks", tags=["stocks"])
api_router.include_router(sentiment_router, prefix="/sentiment", tags=["sentiment"])
api_router.include_router(symbols_router, prefix="/symbols", tags=["symbols"])
api_router.include_router(system_router, tags=["system"])

__all__ = ["api_router"]
