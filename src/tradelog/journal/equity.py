"""Equity curve — account balance after each realized PnL event.

Two kinds of events move the balance: the final close of a trade, and
partial closes banked while a trade is still open.  (Partials of a
trade that has since closed are already inside its final ``pnl_usd``.)
Events are applied strictly in time order as a fold over an immutable
running state.

Usage::

    curve = build_equity_curve(trades, starting_balance=100_000)
    dd = analyze_drawdown(curve, starting_balance=100_000)
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from tradelog.core.config import DEFAULT_STARTING_BALANCE
from tradelog.core.enums import EventKind

from .metrics import net_pnl
from .record import TradeRecord, as_utc

START_LABEL = "Start"


@dataclass(frozen=True)
class PnlEvent:
    """One realized PnL contribution."""

    timestamp: datetime | None
    pnl_usd: float
    kind: EventKind
    trade: TradeRecord


@dataclass(frozen=True)
class EquityPoint:
    """Balance after an event.  The first point of a curve is ``Start``."""

    label: str
    timestamp: datetime | None
    equity: float
    pnl_usd: float = 0.0
    kind: EventKind = EventKind.START
    trade_id: str | None = None


def iter_pnl_events(trades: Iterable[TradeRecord]) -> Iterator[PnlEvent]:
    """Yield realized PnL events in input order (unsorted).

    Timestamps are normalized to aware datetimes, naive ones as UTC.
    """
    for trade in trades:
        if trade.is_closed:
            yield PnlEvent(as_utc(trade.close_timestamp), net_pnl(trade), EventKind.CLOSE, trade)
        else:
            for partial in trade.partial_closes:
                yield PnlEvent(as_utc(partial.timestamp), partial.pnl_usd, EventKind.PARTIAL, trade)


def chronological_events(trades: Iterable[TradeRecord]) -> list[PnlEvent]:
    """Realized PnL events, stably sorted by timestamp.

    Ties keep input order.  Undated events follow all dated ones.
    """
    events = list(iter_pnl_events(trades))
    dated = sorted(
        (e for e in events if e.timestamp is not None),
        key=lambda e: e.timestamp,
    )
    return dated + [e for e in events if e.timestamp is None]


def _apply(point: EquityPoint, event: PnlEvent) -> EquityPoint:
    """Fold step: the balance after applying ``event``."""
    return EquityPoint(
        label=event.timestamp.isoformat() if event.timestamp else event.trade.trade_id,
        timestamp=event.timestamp,
        equity=point.equity + event.pnl_usd,
        pnl_usd=event.pnl_usd,
        kind=event.kind,
        trade_id=event.trade.trade_id,
    )


def build_equity_curve(
    trades: Iterable[TradeRecord],
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> list[EquityPoint]:
    """Chronological balance series starting with a synthetic Start point."""
    start = EquityPoint(label=START_LABEL, timestamp=None, equity=starting_balance)
    return list(itertools.accumulate(chronological_events(trades), _apply, initial=start))
