"""Tests for the discipline (journal completeness) score."""

from tradelog.journal.discipline import (
    discipline_score,
    is_complete,
    missing_fields,
    score_discipline,
)

from .conftest import make_closed_trade, make_open_trade


def _planned_open(trade_id="o", **overrides):
    fields = dict(
        strategy_tag="breakout",
        timeframe="4h",
        confidence_level=7,
        entry_reason="Range high reclaim",
        stop_price=95.0,
        take_price=115.0,
    )
    fields.update(overrides)
    return make_open_trade(trade_id, **fields)


def _reviewed_closed(trade_id="c", **overrides):
    fields = dict(trade_analysis="Followed plan", violation_tags="none")
    fields.update(overrides)
    return make_closed_trade(100.0, trade_id, **fields)


class TestCompleteness:
    def test_planned_open_trade_is_complete(self):
        assert is_complete(_planned_open())

    def test_open_trade_missing_each_field(self):
        for name, blank in [
            ("strategy_tag", ""),
            ("timeframe", " "),
            ("confidence_level", 0),
            ("entry_reason", ""),
            ("stop_price", None),
            ("take_price", None),
        ]:
            trade = _planned_open(**{name: blank})
            assert missing_fields(trade) == [name]

    def test_reviewed_closed_trade_is_complete(self):
        assert is_complete(_reviewed_closed())

    def test_closed_trade_needs_analysis_and_tags(self):
        assert missing_fields(_reviewed_closed(trade_analysis="")) == ["trade_analysis"]
        assert missing_fields(_reviewed_closed(violation_tags="")) == ["violation_tags"]

    def test_closed_trade_ignores_planning_fields(self):
        assert is_complete(_reviewed_closed(strategy_tag="", stop_price=None))


class TestScore:
    def test_empty_is_zero(self):
        result = score_discipline([])
        assert result.score == 0
        assert result.total_count == 0

    def test_all_complete(self):
        assert discipline_score([_planned_open(), _reviewed_closed()]) == 100

    def test_partial(self):
        trades = [
            _planned_open("a"),
            _planned_open("b", entry_reason=""),
            _reviewed_closed("c"),
            _reviewed_closed("d", trade_analysis=""),
        ]
        result = score_discipline(trades)
        assert result.score == 50
        assert result.complete_count == 2
        assert result.open_complete == 1
        assert result.closed_complete == 1
        assert result.total_count == 4

    def test_rounds_half_up(self):
        # 1 of 8 complete = 12.5%
        trades = [_planned_open("a")] + [_planned_open(f"x{i}", timeframe="") for i in range(7)]
        assert discipline_score(trades) == 13

    def test_rounds_to_nearest(self):
        # 2 of 3 = 66.67%
        trades = [_planned_open("a"), _reviewed_closed("b"), _reviewed_closed("c", violation_tags="")]
        assert discipline_score(trades) == 67
