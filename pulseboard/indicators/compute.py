"""Technical indicator helpers over ascending close-price arrays.

Everything here is pure and synchronous. Scalar helpers return ``None`` when
the input is too short for the indicator's window; the RSI array uses NaN for
indices before its first defined value. No helper raises on short or empty
input.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from pulseboard.models import IndicatorSet

SIX_MONTHS_TRADING_DAYS = 126
TWELVE_MONTHS_TRADING_DAYS = 252
FIFTY_TWO_WEEKS_TRADING_DAYS = 252


def _as_array(values: Sequence[float] | pd.Series | np.ndarray) -> np.ndarray:
    return np.asarray(values, dtype=float)


def sma(closes: Sequence[float], window: int) -> float | None:
    """Mean of the last ``window`` closes."""

    values = _as_array(closes)
    if window <= 0 or values.size < window:
        return None
    return float(values[-window:].mean())


def rsi(closes: Sequence[float], period: int = 14) -> np.ndarray:
    """RSI by Wilder's smoothing, aligned to ``closes``.

    The seed averages are the plain means of gains and losses over the first
    ``period`` day-over-day differences; the first defined value sits at index
    ``period``. Each later index folds its own difference in with weight
    ``1/period``.
    """

    values = _as_array(closes)
    n = values.size
    out = np.full(n, np.nan)
    if period <= 0 or n < period + 1:
        return out

    diffs = np.diff(values)
    seed = diffs[:period]
    avg_gain = float(seed[seed > 0].sum()) / period
    avg_loss = float(-seed[seed < 0].sum()) / period
    out[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period + 1, n):
        diff = diffs[i - 1]
        gain = diff if diff > 0 else 0.0
        loss = -diff if diff < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        out[i] = _rsi_value(avg_gain, avg_loss)
    return out


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


def latest_rsi(closes: Sequence[float], period: int = 14) -> float | None:
    """Last defined RSI value, or ``None`` when the history is too short."""

    values = rsi(closes, period)
    if values.size == 0 or np.isnan(values[-1]):
        return None
    return float(values[-1])


def dist_from_high_pct(closes: Sequence[float], lookback_window: int = FIFTY_TWO_WEEKS_TRADING_DAYS) -> float | None:
    """Percent distance of the last close from the high of the lookback window.

    Zero at a new high, negative below it (-12.3 means 12.3% under the high).
    """

    values = _as_array(closes)
    if values.size == 0:
        return None
    window = values[-lookback_window:] if lookback_window > 0 else values
    high = float(window.max())
    if high <= 0:
        return None
    last = float(values[-1])
    return (last - high) / high * 100


def pct_return(values: Sequence[float], n: int) -> float:
    """Percent change between the last value and the value ``n`` trading days earlier."""

    arr = _as_array(values)
    base = float(arr[-1 - n])
    return (float(arr[-1]) - base) / base * 100


def rel_vs_benchmark(closes: Sequence[float], benchmark: Sequence[float], target_days: int) -> float:
    """Excess return over ``benchmark`` across the last ``target_days`` trading days.

    Both arrays are aligned by offset from their ends, not by calendar date.
    The horizon shrinks to the shorter history; with no overlap the result is 0.
    """

    stock = _as_array(closes)
    bench = _as_array(benchmark)
    n = min(target_days, stock.size - 1, bench.size - 1)
    if n <= 0:
        return 0.0
    return pct_return(stock, n) - pct_return(bench, n)


def _relative(closes: np.ndarray, benchmark: np.ndarray, target_days: int) -> float | None:
    if closes.size < 2 or benchmark.size < 2:
        return None
    return rel_vs_benchmark(closes, benchmark, target_days)


def compute_indicators(closes: Sequence[float], benchmark_closes: Sequence[float] | None = None) -> IndicatorSet:
    """Build the watchlist indicator set for one close-price history."""

    values = _as_array(closes)
    bench = _as_array(benchmark_closes if benchmark_closes is not None else [])
    return IndicatorSet(
        sma50=sma(values, 50),
        sma200=sma(values, 200),
        rsi14=latest_rsi(values, 14),
        dist_from_high_pct=dist_from_high_pct(values, FIFTY_TWO_WEEKS_TRADING_DAYS),
        rel_vs_benchmark_6m=_relative(values, bench, SIX_MONTHS_TRADING_DAYS),
        rel_vs_benchmark_12m=_relative(values, bench, TWELVE_MONTHS_TRADING_DAYS),
    )


def day_change_pct(closes: Sequence[float]) -> float | None:
    """Day-over-day percent change of the last close."""

    values = _as_array(closes)
    if values.size < 2:
        return None
    return pct_return(values, 1)


__all__ = [
    "FIFTY_TWO_WEEKS_TRADING_DAYS",
    "SIX_MONTHS_TRADING_DAYS",
    "TWELVE_MONTHS_TRADING_DAYS",
    "compute_indicators",
    "day_change_pct",
    "dist_from_high_pct",
    "latest_rsi",
    "pct_return",
    "rel_vs_benchmark",
    "rsi",
    "sma",
]
