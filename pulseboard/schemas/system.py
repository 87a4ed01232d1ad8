"""Operational endpoint schemas."""

from __future__ import annotations

from pydantic import BaseModel


class PrewarmResponse(BaseModel):
    warmed: int
    total: int


class DiagResponse(BaseModel):
    """Which provider credentials are configured; never the keys themselves."""

    finnhub_key_present: bool
    alpha_vantage_key_present: bool
    primary_provider: str
    secondary_provider: str


__all__ = ["DiagResponse", "PrewarmResponse"]
