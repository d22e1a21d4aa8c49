"""Daily PnL buckets in the trader's local calendar.

Feeds the PnL calendar and heatmap.  Each realized PnL event (final
close, or partial close of a still-open trade) is assigned to the local
date it happened on in the trader's IANA timezone: a trade closed at
23:30 UTC is next-day PnL for a trader in Moscow.  Naive timestamps are
read as UTC, never as the host clock's zone.

Usage::

    days = bucket_daily_pnl(trades, "Europe/Moscow")
    days["2024-03-15"].pnl_usd
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tradelog.core.config import DEFAULT_STARTING_BALANCE, DEFAULT_TIMEZONE

from .equity import iter_pnl_events
from .record import TradeRecord

logger = logging.getLogger(__name__)

DATE_KEY_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DailyBucket:
    """Realized PnL of one local calendar day."""

    date: str
    pnl_usd: float = 0.0
    pnl_percent: float = 0.0
    trades: tuple[TradeRecord, ...] = ()

    @property
    def count(self) -> int:
        """Distinct trades that realized PnL on this day."""
        return len(self.trades)


@dataclass
class _DayTotals:
    """Accumulator for one local day."""

    pnl_usd: float = 0.0
    pnl_percent: float = 0.0
    trades: list[TradeRecord] = field(default_factory=list)

    def record(self, pnl_usd: float, balance: float, trade: TradeRecord) -> None:
        self.pnl_usd += pnl_usd
        if balance > 0:
            self.pnl_percent += pnl_usd / balance * 100
        if not any(t is trade for t in self.trades):
            self.trades.append(trade)

    def freeze(self, key: str) -> DailyBucket:
        return DailyBucket(key, self.pnl_usd, self.pnl_percent, tuple(self.trades))


def resolve_timezone(name: str | tzinfo | None) -> tzinfo:
    """IANA zone for ``name``; unknown names fall back to UTC."""
    if isinstance(name, tzinfo):
        return name
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, bucketing in UTC", name)
        return ZoneInfo(DEFAULT_TIMEZONE)


def bucket_daily_pnl(
    trades: Iterable[TradeRecord],
    timezone: str | tzinfo | None = DEFAULT_TIMEZONE,
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> dict[str, DailyBucket]:
    """Group realized PnL by local date, keys in ascending order.

    Events without a timestamp cannot be placed on a day and are
    skipped.
    """
    zone = resolve_timezone(timezone)
    totals: dict[str, _DayTotals] = defaultdict(_DayTotals)
    skipped = 0

    for event in iter_pnl_events(trades):
        if event.timestamp is None:
            skipped += 1
            continue
        key = event.timestamp.astimezone(zone).strftime(DATE_KEY_FORMAT)
        balance = event.trade.account_balance_at_entry or starting_balance
        totals[key].record(event.pnl_usd, balance, event.trade)

    if skipped:
        logger.debug("Skipped %d undated PnL events", skipped)
    return {key: totals[key].freeze(key) for key in sorted(totals)}
