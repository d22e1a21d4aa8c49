"""Trade record — the engine's input data model.

A TradeRecord is one journal entry as the persistence layer hands it
over: a single position with its original entry, optional scale-in legs
(DCA adds), optional partial exits, risk levels and the trader's
psychology/compliance notes.  Nested collections arrive already decoded
(see :mod:`tradelog.journal.ingest`), so the calculators never parse.

Records are owned by the persistence layer; the engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from tradelog.core.enums import Direction, TradePhase


def as_utc(ts: datetime | None) -> datetime | None:
    """Make ``ts`` aware.  Naive datetimes are taken as UTC."""
    if ts is not None and ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


@dataclass(frozen=True)
class AddLeg:
    """A scale-in (DCA) leg added to an open position."""

    price: float
    size_usd: float
    timestamp: datetime | None = None


@dataclass(frozen=True)
class PartialClose:
    """A realized partial exit taken while the position stays open."""

    pnl_usd: float = 0.0
    timestamp: datetime | None = None


@dataclass
class TradeRecord:
    """One journal trade.

    Parameters
    ----------
    trade_id : str
        Identifier assigned by the persistence layer.
    coin : str
        Instrument, e.g. ``"BTC"``.
    direction : Direction
        ``Direction.LONG`` or ``Direction.SHORT``.
    entry_price : float
        Current (possibly averaged) entry price.  Must be positive.
    position_size : float
        Notional size in USD.  Must be positive.
    """

    # Identity
    trade_id: str = ""
    coin: str = ""
    direction: Direction = Direction.LONG

    # Pricing
    entry_price: float = 0.0
    close_price: float | None = None
    stop_price: float | None = None
    take_price: float | None = None
    original_entry_price: float | None = None

    # Sizing
    position_size: float = 0.0
    account_balance_at_entry: float | None = None

    # Realized PnL recorded by the journal (authoritative when present)
    pnl_usd: float | None = None

    # Risk provenance, first non-empty wins
    original_risk_usd: float | None = None
    max_risk_usd: float | None = None
    risk_usd: float | None = None

    # Position history
    adds_history: list[AddLeg] = field(default_factory=list)
    partial_closes: list[PartialClose] = field(default_factory=list)

    # Compliance / psychology
    rule_compliance: bool | None = None
    entry_reason: str = ""
    trade_analysis: str = ""
    violation_tags: str = ""
    strategy_tag: str = ""
    timeframe: str = ""
    confidence_level: float | None = None
    emotional_state: float | None = None

    # Timing
    date_open: datetime | None = None
    date_close: datetime | None = None

    @property
    def is_closed(self) -> bool:
        return self.close_price is not None

    @property
    def phase(self) -> TradePhase:
        return TradePhase.CLOSED if self.is_closed else TradePhase.OPEN

    @property
    def has_stop(self) -> bool:
        return self.stop_price is not None and self.stop_price > 0

    @property
    def has_take(self) -> bool:
        return self.take_price is not None and self.take_price > 0

    @property
    def close_timestamp(self) -> datetime | None:
        """When the trade's final PnL was realized (falls back to open date)."""
        return self.date_close or self.date_open
