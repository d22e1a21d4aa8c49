"""Portfolio statistics over closed trades.

Winrate, profit factor, expectancy and average R for a journal.
Breakeven trades are counted separately and excluded from the winrate
denominator, so scratching a trade neither helps nor hurts the winrate.

Usage::

    stats = aggregate_metrics(trades, config)
    print(stats.winrate, stats.profit_factor)   # 54.5, 1.82 (or "N/A")
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from tradelog.core.config import AnalyticsConfig
from tradelog.core.enums import TradeOutcome

from .metrics import compute_trade_metrics, outcome_of
from .record import TradeRecord

logger = logging.getLogger(__name__)

# Profit factor when there are no losing trades (including no trades at all)
PROFIT_FACTOR_NA = "N/A"

_DEFAULT_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class AggregateMetrics:
    """Journal-level performance summary."""

    trades_count: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    winrate: float = 0.0
    lossrate: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float | str = PROFIT_FACTOR_NA
    expectancy: float = 0.0
    avg_r: float = 0.0
    r_trades_count: int = 0
    net_pnl_usd: float = 0.0
    net_pnl_percent: float = 0.0


def _profit_factor(gross_profit: float, gross_loss: float) -> float | str:
    if gross_loss == 0:
        return PROFIT_FACTOR_NA
    if gross_profit == 0:
        return 0.0
    return gross_profit / gross_loss


def aggregate_metrics(
    trades: Iterable[TradeRecord],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> AggregateMetrics:
    """Aggregate closed trades.  Open trades are ignored.

    An empty journal yields a zero-valued result with profit factor
    ``"N/A"``.
    """
    wins = losses = breakevens = 0
    gross_profit = gross_loss = net = 0.0
    r_values: list[float] = []

    for trade in trades:
        if not trade.is_closed:
            continue
        m = compute_trade_metrics(trade, config)
        net += m.net_pnl_usd

        outcome = outcome_of(m.net_pnl_usd, m.balance_usd, config)
        if outcome is TradeOutcome.WIN:
            wins += 1
            gross_profit += m.net_pnl_usd
        elif outcome is TradeOutcome.LOSS:
            losses += 1
            gross_loss += abs(m.net_pnl_usd)
        else:
            breakevens += 1

        if m.r_multiple is not None and math.isfinite(m.r_multiple):
            r_values.append(m.r_multiple)

    total = wins + losses + breakevens
    if total == 0:
        return AggregateMetrics()

    decided = wins + losses
    winrate = wins / decided * 100 if decided else 0.0
    lossrate = losses / decided * 100 if decided else 0.0
    avg_win = gross_profit / wins if wins else 0.0
    avg_loss = gross_loss / losses if losses else 0.0

    result = AggregateMetrics(
        trades_count=total,
        wins=wins,
        losses=losses,
        breakevens=breakevens,
        winrate=winrate,
        lossrate=lossrate,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=_profit_factor(gross_profit, gross_loss),
        expectancy=winrate / 100 * avg_win - (1 - winrate / 100) * avg_loss,
        avg_r=sum(r_values) / len(r_values) if r_values else 0.0,
        r_trades_count=len(r_values),
        net_pnl_usd=net,
        net_pnl_percent=net / config.starting_balance * 100,
    )
    logger.debug(
        "Aggregated %d closed trades: %d W / %d L / %d BE",
        total, wins, losses, breakevens,
    )
    return result
