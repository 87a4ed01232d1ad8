"""Indicator library tests."""

from __future__ import annotations

import math

import numpy as np
import pytest

from pulseboard.indicators import (
    compute_indicators,
    day_change_pct,
    dist_from_high_pct,
    latest_rsi,
    rel_vs_benchmark,
    rsi,
    sma,
)
from pulseboard.models import IndicatorSet


def test_sma_examples():
    assert sma([1, 2, 3, 4, 5], 5) == 3
    assert sma([1, 2, 3], 5) is None
    assert sma([], 1) is None
    assert sma([10, 1, 2, 3], 3) == pytest.approx(2.0)


def test_rsi_undefined_before_period_and_bounded_after():
    rng = np.random.default_rng(7)
    closes = 100 + np.cumsum(rng.normal(0, 2, size=120))
    closes = np.clip(closes, 1, None)

    values = rsi(closes, 14)

    assert values.shape == closes.shape
    assert np.isnan(values[:14]).all()
    defined = values[14:]
    assert not np.isnan(defined).any()
    assert ((defined >= 0) & (defined <= 100)).all()


def test_rsi_is_exactly_100_on_constant_rising_ramp():
    closes = [float(value) for value in range(99, 114)]

    values = rsi(closes, 14)

    assert len(closes) == 15
    assert values[14] == 100.0
    assert latest_rsi(closes) == 100.0


def test_rsi_short_input_is_all_nan():
    values = rsi([100.0, 101.0, 99.0], 14)
    assert np.isnan(values).all()
    assert latest_rsi([100.0, 101.0, 99.0]) is None
    assert latest_rsi([]) is None


def test_rsi_is_zero_on_falling_ramp():
    closes = [float(value) for value in range(130, 110, -1)]
    assert latest_rsi(closes) == pytest.approx(0.0)


def test_dist_from_high_is_negative_ten_percent():
    closes = [100.0] * 252 + [90.0]
    assert dist_from_high_pct(closes, 252) == -10.0


def test_dist_from_high_is_zero_at_new_high_and_none_when_empty():
    assert dist_from_high_pct([90.0, 95.0, 101.0]) == 0.0
    assert dist_from_high_pct([]) is None


def test_dist_from_high_ignores_values_outside_lookback():
    closes = [200.0] + [100.0] * 10
    assert dist_from_high_pct(closes, 5) == 0.0


def test_rel_vs_benchmark_uses_trading_day_offsets_from_the_end():
    stock = [100.0, 100.0, 110.0]
    bench = [100.0, 102.0, 105.0]
    # the 126-day horizon shrinks to the two days both arrays cover
    assert rel_vs_benchmark(stock, bench, 126) == pytest.approx(10.0 - 5.0)


def test_rel_vs_benchmark_without_overlap_is_zero():
    assert rel_vs_benchmark([100.0], [100.0, 101.0], 126) == 0.0
    assert rel_vs_benchmark([100.0, 101.0], [100.0, 102.0], 0) == 0.0


def test_compute_indicators_marks_short_history_unavailable():
    closes = [100.0 + i for i in range(60)]

    indicators = compute_indicators(closes)

    assert isinstance(indicators, IndicatorSet)
    assert indicators.sma50 == pytest.approx(sum(closes[-50:]) / 50)
    assert indicators.sma200 is None
    assert indicators.rsi14 == 100.0
    assert indicators.dist_from_high_pct == 0.0
    assert indicators.rel_vs_benchmark_6m is None
    assert indicators.rel_vs_benchmark_12m is None


def test_compute_indicators_with_benchmark():
    closes = [100.0] * 100 + [120.0] * 200
    bench = [100.0] * 300

    indicators = compute_indicators(closes, bench)

    assert indicators.sma200 is not None
    assert indicators.rel_vs_benchmark_6m == pytest.approx(0.0)
    assert indicators.rel_vs_benchmark_12m == pytest.approx(20.0)


def test_compute_indicators_on_empty_input_never_raises():
    indicators = compute_indicators([], [])
    assert indicators == IndicatorSet.unavailable()


def test_day_change_pct():
    assert day_change_pct([100.0, 105.0]) == pytest.approx(5.0)
    assert day_change_pct([100.0]) is None
    assert not math.isnan(day_change_pct([100.0, 100.0]))
