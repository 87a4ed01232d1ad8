"""Chart normalisation and overlay merging tests."""

from __future__ import annotations

import pytest

from pulseboard.services.charts import merge_chart, normalize_range, range_start


def test_first_point_is_exactly_100(make_series):
    primary = make_series("ERIC-B.ST", "alpha_vantage", [73.13, 74.0, 71.5, 80.2])

    chart = merge_chart(primary)

    assert chart.points[0].stock == 100.0
    assert chart.points[2].stock == pytest.approx(71.5 / 73.13 * 100)
    assert chart.overlays_included == ()


def test_window_start_rebases_on_first_point_in_window(make_series):
    primary = make_series("AAPL", "finnhub", [50.0, 100.0, 110.0], start="2024-03-01")

    chart = merge_chart(primary, start="2024-03-02")

    assert [p.date for p in chart.points] == ["2024-03-02", "2024-03-03"]
    assert chart.points[0].stock == 100.0
    assert chart.points[1].stock == pytest.approx(110.0)


def test_overlay_without_matching_dates_is_omitted(make_series):
    primary = make_series("AAPL", "finnhub", [10.0, 11.0, 12.0], start="2024-01-01")
    offset = make_series("^OMXS30", "finnhub", [2000.0, 2010.0], start="2023-06-01")

    chart = merge_chart(primary, {"omx": offset})

    assert "omx" not in chart.overlays_included
    assert all("omx" not in point.overlays for point in chart.points)


def test_partial_overlap_renders_none_not_zero(make_series):
    primary = make_series("AAPL", "finnhub", [10.0, 11.0, 12.0, 13.0], start="2024-01-01")
    spy = make_series("SPY", "finnhub", [400.0, 420.0], start="2024-01-02")

    chart = merge_chart(primary, {"spy": spy})

    assert chart.overlays_included == ("spy",)
    values = [point.overlays["spy"] for point in chart.points]
    assert values[0] is None
    assert values[1] == 100.0
    assert values[2] == pytest.approx(105.0)
    assert values[3] is None


def test_volume_passes_through_unindexed(make_series):
    primary = make_series("AAPL", "alpha_vantage", [10.0, 20.0], volumes=[1500.0, 2500.0])

    chart = merge_chart(primary)

    assert [point.volume for point in chart.points] == [1500.0, 2500.0]


def test_empty_window_yields_empty_payload(make_series):
    primary = make_series("AAPL", "finnhub", [10.0, 11.0], start="2024-01-01")

    chart = merge_chart(primary, start="2025-01-01")

    assert chart.points == ()
    assert chart.overlays_included == ()


def test_range_start():
    assert range_start("2024-06-30", "1M") == "2024-05-30"
    assert range_start("2024-06-30", "1y") == "2023-06-30"
    assert range_start("2024-06-30", "5Y") == "2019-06-30"
    assert range_start("2024-06-30", "MAX") is None


def test_unknown_range_is_rejected():
    with pytest.raises(ValueError):
        normalize_range("3W")
