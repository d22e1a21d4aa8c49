"""Aggregate risk and reward of the positions that are still open.

Answers "if every stop is hit now, what do I lose, and if every target
is hit, what do I make?" for the open book.  A stop trailed to entry
carries no risk; when the whole book is risk-free the reward-to-risk
ratio is reported as ``NO_RISK`` instead of dividing by ~zero.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .record import TradeRecord

logger = logging.getLogger(__name__)

NO_RISK = "NO_RISK"

# Stop within 0.01% of entry is treated as a breakeven stop
MIN_STOP_DISTANCE = 1e-4
# Total risk below one cent makes the book's RR meaningless
MIN_TOTAL_RISK_USD = 0.01


@dataclass(frozen=True)
class OpenExposure:
    """Open-book exposure.  Percentages are of the current balance."""

    count: int = 0
    total_risk_usd: float = 0.0
    total_risk_percent: float = 0.0
    total_potential_usd: float = 0.0
    total_potential_percent: float = 0.0
    total_rr: float | str = NO_RISK


def _distance_usd(trade: TradeRecord, level: float | None) -> float:
    if level is None or level <= 0 or trade.entry_price <= 0:
        return 0.0
    return abs(trade.entry_price - level) / trade.entry_price * trade.position_size


def position_risk_usd(trade: TradeRecord) -> float:
    """Loss if the stop is hit; 0 without a stop or with a breakeven stop."""
    if not trade.has_stop or trade.entry_price <= 0:
        return 0.0
    if abs(trade.entry_price - trade.stop_price) / trade.entry_price < MIN_STOP_DISTANCE:
        return 0.0
    return _distance_usd(trade, trade.stop_price)


def position_potential_usd(trade: TradeRecord) -> float:
    """Gain if the take-profit is hit; 0 without a target."""
    return _distance_usd(trade, trade.take_price)


def aggregate_open_exposure(
    trades: Iterable[TradeRecord],
    current_balance: float,
) -> OpenExposure:
    """Sum risk and potential over open trades.  Closed trades are ignored."""
    count = 0
    total_risk = total_potential = 0.0
    for trade in trades:
        if trade.is_closed:
            continue
        count += 1
        total_risk += position_risk_usd(trade)
        total_potential += position_potential_usd(trade)

    def pct(value: float) -> float:
        return value / current_balance * 100 if current_balance > 0 else 0.0

    if current_balance <= 0 and count:
        logger.warning(
            "Non-positive balance %.2f: exposure percentages reported as 0",
            current_balance,
        )

    return OpenExposure(
        count=count,
        total_risk_usd=total_risk,
        total_risk_percent=pct(total_risk),
        total_potential_usd=total_potential,
        total_potential_percent=pct(total_potential),
        total_rr=(
            NO_RISK if total_risk < MIN_TOTAL_RISK_USD
            else total_potential / total_risk
        ),
    )
