"""Ingestion boundary — raw journal rows to :class:`TradeRecord`.

The persistence layer stores numbers as strings, nested collections
(``adds_history``, ``partial_closes``) as JSON text, and leaves most
fields blank.  Everything is normalised here, once, so the calculators
downstream receive structured data and never parse or catch.

Usage::

    trades = trades_from_dicts(rows)
    metrics = [compute_trade_metrics(t, config) for t in trades]
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from tradelog.core.enums import Direction, ParseStatus
from tradelog.core.errors import TradeDataError

from .record import AddLeg, PartialClose, TradeRecord, as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LegParse:
    """Outcome of decoding a nested leg collection.

    ``MALFORMED`` carries no items and behaves exactly like ``EMPTY``;
    the status only exists so callers can report it.
    """

    status: ParseStatus
    items: list[Mapping[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.OK


# ---------------------------------------------------------------------- #
# Scalar coercion                                                          #
# ---------------------------------------------------------------------- #

def to_float(value: Any) -> float | None:
    """Lenient numeric parse.  Blank, non-numeric and non-finite -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC-based datetime.

    Naive values and date-only strings are taken as UTC.  Anything
    unparseable is treated as missing.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip().replace(" ", "T", 1)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Unparseable timestamp %r treated as missing", value)
            return None
    else:
        return None
    return as_utc(dt)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if str(v).strip())
    return str(value).strip()


def _to_bool(value: Any) -> bool | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _to_direction(value: Any) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str) and value.strip().lower() == "short":
        return Direction.SHORT
    return Direction.LONG


# ---------------------------------------------------------------------- #
# Nested collections                                                       #
# ---------------------------------------------------------------------- #

def decode_legs(value: Any) -> LegParse:
    """Decode a nested collection that may arrive as JSON text.

    Accepts ``None``, ``""``, a JSON array string, or an already
    structured list of mappings.  Never raises.
    """
    if value is None:
        return LegParse(ParseStatus.EMPTY)
    if isinstance(value, str):
        if not value.strip():
            return LegParse(ParseStatus.EMPTY)
        try:
            value = json.loads(value)
        except (ValueError, RecursionError):
            return LegParse(ParseStatus.MALFORMED)
    if not isinstance(value, (list, tuple)):
        return LegParse(ParseStatus.MALFORMED)
    if not value:
        return LegParse(ParseStatus.EMPTY)
    if not all(isinstance(item, Mapping) for item in value):
        return LegParse(ParseStatus.MALFORMED)
    return LegParse(ParseStatus.OK, list(value))


def _legs(raw: Mapping[str, Any], key: str, trade_id: str) -> list[Mapping[str, Any]]:
    parsed = decode_legs(raw.get(key))
    if parsed.status is ParseStatus.MALFORMED:
        logger.warning(
            "Malformed %s on trade %s ignored", key, trade_id or "?"
        )
    return parsed.items


def _add_legs(items: Iterable[Mapping[str, Any]]) -> list[AddLeg]:
    adds = []
    for item in items:
        price = to_float(item.get("price"))
        size = to_float(item.get("size_usd"))
        if price is None or price <= 0 or size is None or size <= 0:
            continue
        adds.append(AddLeg(price, size, to_timestamp(item.get("timestamp"))))
    return adds


def _partial_closes(items: Iterable[Mapping[str, Any]]) -> list[PartialClose]:
    return [
        PartialClose(
            pnl_usd=to_float(item.get("pnl_usd")) or 0.0,
            timestamp=to_timestamp(item.get("timestamp")),
        )
        for item in items
    ]


# ---------------------------------------------------------------------- #
# Records                                                                  #
# ---------------------------------------------------------------------- #

def trade_from_dict(raw: Mapping[str, Any]) -> TradeRecord:
    """Build a TradeRecord from one persistence-layer row.

    Raises:
        TradeDataError: If the row has no positive ``entry_price`` or
            ``position_size``.  Every optional field degrades silently.
    """
    trade_id = _to_text(raw.get("id", raw.get("trade_id")))

    entry_price = to_float(raw.get("entry_price"))
    if entry_price is None or entry_price <= 0:
        raise TradeDataError(trade_id, "entry_price must be a positive number")
    position_size = to_float(raw.get("position_size"))
    if position_size is None or position_size <= 0:
        raise TradeDataError(trade_id, "position_size must be a positive number")

    return TradeRecord(
        trade_id=trade_id,
        coin=_to_text(raw.get("coin")),
        direction=_to_direction(raw.get("direction")),
        entry_price=entry_price,
        close_price=to_float(raw.get("close_price")),
        stop_price=to_float(raw.get("stop_price")),
        take_price=to_float(raw.get("take_price")),
        original_entry_price=to_float(raw.get("original_entry_price")),
        position_size=position_size,
        account_balance_at_entry=to_float(raw.get("account_balance_at_entry")),
        pnl_usd=to_float(raw.get("pnl_usd")),
        original_risk_usd=to_float(raw.get("original_risk_usd")),
        max_risk_usd=to_float(raw.get("max_risk_usd")),
        risk_usd=to_float(raw.get("risk_usd")),
        adds_history=_add_legs(_legs(raw, "adds_history", trade_id)),
        partial_closes=_partial_closes(_legs(raw, "partial_closes", trade_id)),
        rule_compliance=_to_bool(raw.get("rule_compliance")),
        entry_reason=_to_text(raw.get("entry_reason")),
        trade_analysis=_to_text(raw.get("trade_analysis")),
        violation_tags=_to_text(raw.get("violation_tags")),
        strategy_tag=_to_text(raw.get("strategy_tag")),
        timeframe=_to_text(raw.get("timeframe")),
        confidence_level=to_float(raw.get("confidence_level")),
        emotional_state=to_float(raw.get("emotional_state")),
        date_open=to_timestamp(raw.get("date_open") or raw.get("date")),
        date_close=to_timestamp(raw.get("date_close")),
    )


def trades_from_dicts(
    rows: Iterable[Mapping[str, Any]],
    *,
    skip_invalid: bool = True,
) -> list[TradeRecord]:
    """Convert many rows, logging and skipping the ones that are not trades."""
    trades: list[TradeRecord] = []
    for row in rows:
        try:
            trades.append(trade_from_dict(row))
        except TradeDataError as exc:
            if not skip_invalid:
                raise
            logger.warning("Skipping journal row: %s", exc)
    return trades
