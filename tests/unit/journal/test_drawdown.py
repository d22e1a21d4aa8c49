"""Tests for the drawdown analyzer."""

import pytest

from tradelog.journal.drawdown import analyze_drawdown, max_drawdown
from tradelog.journal.equity import build_equity_curve

from .conftest import make_closed_trade


class TestMaxDrawdown:
    def test_peak_to_trough(self):
        dd = max_drawdown([100_000, 105_000, 98_000, 102_000], 100_000)
        assert dd.usd == pytest.approx(7_000)
        assert dd.percent == pytest.approx(6.6667, rel=1e-4)
        assert dd.peak_equity == 105_000
        assert dd.trough_equity == 98_000

    def test_monotonic_curve_has_no_drawdown(self):
        dd = max_drawdown([100_000, 100_000, 101_000, 150_000], 100_000)
        assert dd.percent == 0.0
        assert dd.usd == 0.0

    def test_empty_curve(self):
        dd = max_drawdown([], 100_000)
        assert dd.percent == 0.0
        assert dd.usd == 0.0

    def test_peak_seeded_with_starting_balance(self):
        dd = max_drawdown([90_000, 95_000], 100_000)
        assert dd.usd == pytest.approx(10_000)
        assert dd.percent == pytest.approx(10.0)

    def test_peak_never_resets(self):
        dd = max_drawdown([120_000, 90_000, 100_000, 95_000], 100_000)
        assert dd.usd == pytest.approx(30_000)
        assert dd.percent == pytest.approx(25.0)

    def test_percent_and_usd_tracked_independently(self):
        # 10% off a 100k peak, then 15k (~7.5%) off a 200k peak
        dd = max_drawdown([90_000, 200_000, 185_000], 100_000)
        assert dd.percent == pytest.approx(10.0)
        assert dd.usd == pytest.approx(15_000)
        assert dd.peak_equity == 200_000

    def test_non_positive_peak_reports_zero_percent(self):
        dd = max_drawdown([-50.0], 0.0)
        assert dd.percent == 0.0
        assert dd.usd == pytest.approx(50.0)


class TestAnalyzeDrawdown:
    def test_from_equity_curve(self):
        trades = [
            make_closed_trade(5_000.0, "a"),
            make_closed_trade(-7_000.0, "b"),
            make_closed_trade(4_000.0, "c"),
        ]
        # Same close time: input order is kept
        curve = build_equity_curve(trades, 100_000)
        dd = analyze_drawdown(curve, 100_000)
        assert dd.usd == pytest.approx(7_000)
        assert dd.percent == pytest.approx(100 * 7_000 / 105_000)

    def test_idempotent(self):
        curve = build_equity_curve([make_closed_trade(-10.0)], 1_000)
        assert analyze_drawdown(curve, 1_000) == analyze_drawdown(curve, 1_000)
