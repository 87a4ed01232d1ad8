"""Index-to-100 chart normalisation and overlay alignment."""

from __future__ import annotations

from typing import Mapping

import pandas as pd

from pulseboard.models import ChartPayload, ChartPoint, Series

CHART_RANGES = ("1M", "6M", "1Y", "5Y", "MAX")

_RANGE_OFFSETS = {
    "1M": pd.DateOffset(months=1),
    "6M": pd.DateOffset(months=6),
    "1Y": pd.DateOffset(years=1),
    "5Y": pd.DateOffset(years=5),
}


def normalize_range(chart_range: str) -> str:
    key = chart_range.strip().upper()
    if key not in CHART_RANGES:
        raise ValueError(f"Unsupported chart range {chart_range!r}; expected one of {', '.join(CHART_RANGES)}")
    return key


def range_start(last_date: str, chart_range: str) -> str | None:
    """First date shown for ``chart_range`` ending at ``last_date``; ``None`` means all history."""

    key = normalize_range(chart_range)
    if key == "MAX":
        return None
    start = pd.Timestamp(last_date) - _RANGE_OFFSETS[key]
    return start.strftime("%Y-%m-%d")


def _to_frame(series: Series) -> pd.Series:
    return pd.Series(series.closes, index=series.dates, dtype="float64")


def merge_chart(
    primary: Series,
    overlays: Mapping[str, Series] | None = None,
    start: str | None = None,
) -> ChartPayload:
    """Rebase ``primary`` and each overlay to 100 and align overlays on exact dates.

    Each overlay is rebased on its first value that lands on a primary date
    inside the window, so every included overlay starts at 100 on the chart.
    Overlays with no matching date are dropped.
    """

    window = primary.since(start)
    if not len(window):
        return ChartPayload(points=(), overlays_included=())

    stock = _to_frame(window)
    stock_index = stock / stock.iloc[0] * 100.0

    aligned: dict[str, pd.Series] = {}
    for label, overlay in (overlays or {}).items():
        if overlay is None or not len(overlay):
            continue
        matched = _to_frame(overlay).reindex(stock.index)
        valid = matched.dropna()
        if valid.empty:
            continue
        aligned[label] = matched / valid.iloc[0] * 100.0

    points = []
    for position, point in enumerate(window.points):
        values = {}
        for label, indexed in aligned.items():
            value = indexed.iloc[position]
            values[label] = None if pd.isna(value) else float(value)
        points.append(
            ChartPoint(
                date=point.date,
                stock=float(stock_index.iloc[position]),
                overlays=values,
                volume=point.volume,
            )
        )
    return ChartPayload(points=tuple(points), overlays_included=tuple(aligned))


__all__ = ["CHART_RANGES", "merge_chart", "normalize_range", "range_start"]
