"""Pure technical indicators over close-price arrays."""

from .compute import (
    compute_indicators,
    day_change_pct,
    dist_from_high_pct,
    latest_rsi,
    rel_vs_benchmark,
    rsi,
    sma,
)

__all__ = [
    "compute_indicators",
    "day_change_pct",
    "dist_from_high_pct",
    "latest_rsi",
    "rel_vs_benchmark",
    "rsi",
    "sma",
]
