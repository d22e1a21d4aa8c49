"""Per-trade derived metrics.

Turns one :class:`TradeRecord` into its analytics: net PnL, the
size-weighted effective entry after DCA adds, dollar risk and the
R-multiple.  Risk and R are ``None`` when the trade has no usable
stop; consumers must render that as "no data", never as zero.

Usage::

    m = compute_trade_metrics(trade, config)
    if m.r_multiple is not None:
        print(f"{m.r_multiple:+.2f}R")
"""

from __future__ import annotations

from dataclasses import dataclass

from tradelog.core.config import AnalyticsConfig
from tradelog.core.enums import TradeOutcome

from .record import TradeRecord

_DEFAULT_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class TradeMetrics:
    """Derived figures for one trade."""

    trade_id: str
    net_pnl_usd: float
    effective_entry_price: float
    risk_usd: float | None
    r_multiple: float | None
    has_defined_stop_loss: bool
    balance_usd: float
    pnl_percent: float
    planned_rr: float | None
    is_closed: bool


# ---------------------------------------------------------------------- #
# Building blocks                                                          #
# ---------------------------------------------------------------------- #

def balance_for(trade: TradeRecord, config: AnalyticsConfig = _DEFAULT_CONFIG) -> float:
    """Account balance the trade is measured against."""
    if trade.account_balance_at_entry:
        return trade.account_balance_at_entry
    return config.starting_balance


def net_pnl(trade: TradeRecord) -> float:
    """Realized PnL in USD.

    The journal's own ``pnl_usd`` wins.  Otherwise closed trades are
    marked to their close price with no fee model; open trades
    contribute nothing.
    """
    if trade.pnl_usd is not None:
        return trade.pnl_usd
    if trade.close_price is None or trade.entry_price <= 0:
        return 0.0
    move = (trade.close_price - trade.entry_price) * trade.direction.sign
    return move * (trade.position_size / trade.entry_price)


def effective_entry_price(trade: TradeRecord) -> float:
    """USD-size-weighted average of the original entry and every add."""
    if not trade.adds_history:
        return trade.entry_price
    first = trade.original_entry_price or trade.entry_price
    weighted = first * trade.position_size
    total_size = trade.position_size
    for add in trade.adds_history:
        weighted += add.price * add.size_usd
        total_size += add.size_usd
    if total_size <= 0:
        return trade.entry_price
    return weighted / total_size


def resolve_risk(trade: TradeRecord, entry: float) -> float | None:
    """Dollar risk, or None when the trade has no stop or no positive risk.

    Recorded risk fields are consulted first (original, max, current);
    only when all are blank or zero is risk derived from stop distance.
    """
    if not trade.has_stop:
        return None
    for recorded in (trade.original_risk_usd, trade.max_risk_usd, trade.risk_usd):
        if recorded:
            return recorded if recorded > 0 else None
    if entry <= 0:
        return None
    derived = abs(entry - trade.stop_price) / entry * trade.position_size
    return derived if derived > 0 else None


def planned_rr(trade: TradeRecord, entry: float) -> float | None:
    """Planned reward-to-risk from the stop and take levels."""
    if not (trade.has_stop and trade.has_take):
        return None
    risk = abs(entry - trade.stop_price)
    if risk == 0:
        return None
    return abs(trade.take_price - entry) / risk


def is_breakeven(pnl: float, balance: float, config: AnalyticsConfig = _DEFAULT_CONFIG) -> bool:
    """Whether ``pnl`` is within the absolute-or-relative breakeven band."""
    magnitude = abs(pnl)
    if magnitude <= config.breakeven_epsilon_usd:
        return True
    if balance > 0 and magnitude / balance * 100 <= config.breakeven_epsilon_percent:
        return True
    return False


def outcome_of(pnl: float, balance: float, config: AnalyticsConfig = _DEFAULT_CONFIG) -> TradeOutcome:
    if is_breakeven(pnl, balance, config):
        return TradeOutcome.BREAKEVEN
    return TradeOutcome.WIN if pnl > 0 else TradeOutcome.LOSS


# ---------------------------------------------------------------------- #
# Public entry point                                                       #
# ---------------------------------------------------------------------- #

def compute_trade_metrics(
    trade: TradeRecord,
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> TradeMetrics:
    """Compute every derived per-trade figure."""
    pnl = net_pnl(trade)
    entry = effective_entry_price(trade)
    risk = resolve_risk(trade, entry)
    balance = balance_for(trade, config)
    return TradeMetrics(
        trade_id=trade.trade_id,
        net_pnl_usd=pnl,
        effective_entry_price=entry,
        risk_usd=risk,
        r_multiple=pnl / risk if risk is not None else None,
        has_defined_stop_loss=trade.has_stop,
        balance_usd=balance,
        pnl_percent=pnl / balance * 100 if balance > 0 else 0.0,
        planned_rr=planned_rr(trade, entry),
        is_closed=trade.is_closed,
    )
