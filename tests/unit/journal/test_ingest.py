"""Tests for the ingestion boundary — raw rows to TradeRecord."""

import json
import logging
from datetime import datetime, timezone

import pytest

from tradelog.core.enums import Direction, ParseStatus
from tradelog.core.errors import TradeDataError
from tradelog.journal.ingest import (
    decode_legs,
    to_float,
    to_timestamp,
    trade_from_dict,
    trades_from_dicts,
)


def _row(**overrides):
    row = {
        "id": "T-1",
        "coin": "ETH",
        "direction": "Short",
        "entry_price": "2500.5",
        "position_size": 1000,
        "date": "2024-02-01T10:00:00Z",
    }
    row.update(overrides)
    return row


class TestDecodeLegs:
    def test_none_and_blank_are_empty(self):
        assert decode_legs(None).status is ParseStatus.EMPTY
        assert decode_legs("  ").status is ParseStatus.EMPTY
        assert decode_legs("[]").status is ParseStatus.EMPTY

    def test_json_string(self):
        parsed = decode_legs('[{"price": 110, "size_usd": 500}]')
        assert parsed.ok
        assert parsed.items == [{"price": 110, "size_usd": 500}]

    def test_structured_list(self):
        parsed = decode_legs([{"pnl_usd": 5}])
        assert parsed.status is ParseStatus.OK

    @pytest.mark.parametrize("value", [
        "{not json",
        '{"price": 1}',
        "[1, 2]",
        42,
        "[" * 100_000 + "]" * 100_000,
    ])
    def test_malformed(self, value):
        parsed = decode_legs(value)
        assert parsed.status is ParseStatus.MALFORMED
        assert parsed.items == []


class TestScalarCoercion:
    def test_to_float(self):
        assert to_float("12.5") == 12.5
        assert to_float(3) == 3.0
        assert to_float("") is None
        assert to_float("abc") is None
        assert to_float(None) is None
        assert to_float(float("nan")) is None
        assert to_float(True) is None

    def test_timestamp_z_suffix(self):
        assert to_timestamp("2024-02-01T10:00:00Z") == datetime(2024, 2, 1, 10, tzinfo=timezone.utc)

    def test_naive_timestamp_is_utc(self):
        assert to_timestamp("2024-02-01 10:00:00").tzinfo is timezone.utc

    def test_date_only_is_utc_midnight(self):
        assert to_timestamp("2024-02-01") == datetime(2024, 2, 1, tzinfo=timezone.utc)

    def test_unparseable_is_missing(self):
        assert to_timestamp("yesterday") is None
        assert to_timestamp("") is None


class TestTradeFromDict:
    def test_basic_fields(self):
        trade = trade_from_dict(_row(close_price="2400", stop_price="", pnl_usd="40"))
        assert trade.trade_id == "T-1"
        assert trade.direction is Direction.SHORT
        assert trade.entry_price == 2500.5
        assert trade.close_price == 2400.0
        assert trade.stop_price is None
        assert trade.pnl_usd == 40.0
        assert trade.is_closed
        assert trade.date_open == datetime(2024, 2, 1, 10, tzinfo=timezone.utc)

    def test_date_open_preferred_over_date(self):
        trade = trade_from_dict(_row(date_open="2024-01-31T08:00:00Z"))
        assert trade.date_open.day == 31

    def test_adds_and_partials_decoded(self):
        trade = trade_from_dict(_row(
            adds_history=json.dumps([
                {"price": 2450, "size_usd": 500, "timestamp": "2024-02-02T00:00:00Z"},
                {"price": "", "size_usd": 100},
            ]),
            partial_closes=[{"pnl_usd": "12.5", "timestamp": "2024-02-03T00:00:00Z"}, {}],
        ))
        assert len(trade.adds_history) == 1
        assert trade.adds_history[0].price == 2450.0
        assert [p.pnl_usd for p in trade.partial_closes] == [12.5, 0.0]
        assert trade.partial_closes[1].timestamp is None

    def test_malformed_history_degrades_to_empty(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tradelog.journal.ingest"):
            trade = trade_from_dict(_row(adds_history="{oops", partial_closes="nope"))
        assert trade.adds_history == []
        assert trade.partial_closes == []
        assert "Malformed adds_history" in caplog.text

    def test_violation_tags_list_is_joined(self):
        trade = trade_from_dict(_row(violation_tags=["fomo", "oversize"]))
        assert trade.violation_tags == "fomo, oversize"

    def test_rule_compliance(self):
        assert trade_from_dict(_row(rule_compliance="true")).rule_compliance is True
        assert trade_from_dict(_row(rule_compliance=False)).rule_compliance is False
        assert trade_from_dict(_row()).rule_compliance is None

    @pytest.mark.parametrize("field,value", [
        ("entry_price", None),
        ("entry_price", "0"),
        ("position_size", -5),
        ("position_size", "x"),
    ])
    def test_invalid_required_fields_raise(self, field, value):
        with pytest.raises(TradeDataError, match="T-1"):
            trade_from_dict(_row(**{field: value}))


class TestTradesFromDicts:
    def test_skips_invalid_rows(self):
        trades = trades_from_dicts([_row(), _row(id="bad", entry_price=None), _row(id="T-2")])
        assert [t.trade_id for t in trades] == ["T-1", "T-2"]

    def test_strict_mode_raises(self):
        with pytest.raises(TradeDataError):
            trades_from_dicts([_row(entry_price="")], skip_invalid=False)
