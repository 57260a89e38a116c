"""
Tests for roi_optimizer/analysis/trend.py.

What we test
------------
compute_trend():
  - Recent window = last k values; older window = first k values.
  - k < n < 2k → older window shrinks to the n - k values before the
    recent window, never overlapping it.
  - n <= k → older_avg == recent_avg, growth 0.
  - older_avg == 0 → growth 0.
  - Empty input → all zeros.
  - window < 1 → ValueError.
TrendSignal.is_growing / is_declining thresholds.
chronological(): stable date sort.
"""

from __future__ import annotations

from datetime import date

import pytest

from roi_optimizer.analysis.trend import TrendSignal, chronological, compute_trend
from roi_optimizer.models.investment import SalesDataPoint


class TestComputeTrend:
    def test_six_values(self):
        signal = compute_trend([1, 2, 3, 4, 5, 6])
        assert signal.recent_avg == 5.0
        assert signal.older_avg == 2.0
        assert signal.growth_ratio == pytest.approx(1.5)
        assert signal.sample_size == 6

    def test_windows_do_not_need_to_touch(self):
        signal = compute_trend([1, 2, 3, 100, 5, 6, 7])
        assert signal.recent_avg == 6.0
        assert signal.older_avg == 2.0

    def test_four_values_compare_first_against_last_three(self):
        signal = compute_trend([10.0, 20.0, 30.0, 40.0])
        assert signal.recent_avg == 30.0
        assert signal.older_avg == 10.0
        assert signal.growth_ratio == pytest.approx(2.0)

    def test_five_values_older_window_excludes_recent(self):
        signal = compute_trend([100.0, 200.0, 300.0, 400.0, 500.0])
        assert signal.recent_avg == 400.0
        assert signal.older_avg == 150.0
        assert signal.growth_ratio == pytest.approx(5 / 3)

    def test_series_no_longer_than_window_is_flat(self):
        signal = compute_trend([50.0, 30.0, 10.0])
        assert signal.recent_avg == signal.older_avg == 30.0
        assert signal.growth_ratio == 0.0

    def test_single_value(self):
        signal = compute_trend([7.0])
        assert signal.recent_avg == signal.older_avg == 7.0
        assert signal.growth_ratio == 0.0

    def test_zero_older_avg(self):
        signal = compute_trend([0, 0, 0, 1, 1, 1])
        assert signal.older_avg == 0.0
        assert signal.growth_ratio == 0.0

    def test_empty(self):
        assert compute_trend([]) == TrendSignal(0.0, 0.0, 0.0, 0)

    def test_custom_window(self):
        signal = compute_trend([2, 4, 8], window=1)
        assert signal.recent_avg == 8.0
        assert signal.older_avg == 2.0
        assert signal.growth_ratio == pytest.approx(3.0)

    @pytest.mark.parametrize("window", [0, -1])
    def test_invalid_window(self, window):
        with pytest.raises(ValueError, match="window"):
            compute_trend([1, 2, 3], window=window)


class TestTrendSignalThresholds:
    def test_growing(self):
        signal = TrendSignal(recent_avg=150, older_avg=100, growth_ratio=0.5, sample_size=6)
        assert signal.is_growing(0.3)
        assert not signal.is_growing(0.5)

    def test_declining(self):
        signal = TrendSignal(recent_avg=26, older_avg=30, growth_ratio=-0.1333, sample_size=6)
        assert signal.is_declining(0.9)
        assert not signal.is_declining(0.8)


def test_chronological_is_stable() -> None:
    same_day = date(2024, 2, 1)
    pts = [
        SalesDataPoint(id="b", investment_id="x", date=same_day),
        SalesDataPoint(id="early", investment_id="x", date=date(2024, 1, 1)),
        SalesDataPoint(id="a", investment_id="x", date=same_day),
    ]
    assert [p.id for p in chronological(pts)] == ["early", "b", "a"]
