"""Exit classification — why did a trade close?

Labels each closed trade as a stop-out, a take-profit, a breakeven
scratch or a manual exit, and summarises exit behaviour across a
journal (how often partials and adds are used).

The rules are evaluated top to bottom and the first match wins.
Breakeven comes before stop/take: a trade closed exactly at its stop
after the stop was trailed to entry is a scratch, not a stop-out.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from tradelog.core.config import AnalyticsConfig
from tradelog.core.enums import ExitType

from .metrics import balance_for, is_breakeven, net_pnl
from .record import TradeRecord

logger = logging.getLogger(__name__)

# Close within 0.1% of entry price of a level counts as hitting it
LEVEL_HIT_TOLERANCE = 0.001

_DEFAULT_CONFIG = AnalyticsConfig()

_Rule = Callable[[TradeRecord, AnalyticsConfig], bool]


def _is_open(trade: TradeRecord, config: AnalyticsConfig) -> bool:
    return not trade.is_closed


def _is_breakeven(trade: TradeRecord, config: AnalyticsConfig) -> bool:
    return is_breakeven(net_pnl(trade), balance_for(trade, config), config)


def _hit(trade: TradeRecord, level: float | None) -> bool:
    if level is None or level <= 0:
        return False
    threshold = trade.entry_price * LEVEL_HIT_TOLERANCE
    return abs(trade.close_price - level) < threshold


def _hit_stop(trade: TradeRecord, config: AnalyticsConfig) -> bool:
    return _hit(trade, trade.stop_price)


def _hit_take(trade: TradeRecord, config: AnalyticsConfig) -> bool:
    return _hit(trade, trade.take_price)


# Order is policy: do not reorder.
EXIT_RULES: tuple[tuple[_Rule, ExitType], ...] = (
    (_is_open, ExitType.OPEN),
    (_is_breakeven, ExitType.BREAKEVEN),
    (_hit_stop, ExitType.STOP),
    (_hit_take, ExitType.TAKE),
)


def classify_exit(
    trade: TradeRecord,
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> ExitType:
    """Return the exit type of ``trade``; ``Manual`` when no rule matches."""
    for rule, exit_type in EXIT_RULES:
        if rule(trade, config):
            return exit_type
    return ExitType.MANUAL


@dataclass(frozen=True)
class ExitSummary:
    """Exit behaviour across the closed trades of a journal."""

    stop_losses: int = 0
    take_profits: int = 0
    breakevens: int = 0
    manual_closes: int = 0
    trades_with_partials: int = 0
    avg_partial_count: float = 0.0
    trades_with_adds: int = 0
    avg_adds: float = 0.0


def summarize_exits(
    trades: Iterable[TradeRecord],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> ExitSummary:
    """Count exit types and position-management habits over closed trades."""
    counts: Counter[ExitType] = Counter()
    with_partials = total_partials = 0
    with_adds = total_adds = 0

    for trade in trades:
        if not trade.is_closed:
            continue
        counts[classify_exit(trade, config)] += 1
        if trade.partial_closes:
            with_partials += 1
            total_partials += len(trade.partial_closes)
        if trade.adds_history:
            with_adds += 1
            total_adds += len(trade.adds_history)

    summary = ExitSummary(
        stop_losses=counts[ExitType.STOP],
        take_profits=counts[ExitType.TAKE],
        breakevens=counts[ExitType.BREAKEVEN],
        manual_closes=counts[ExitType.MANUAL],
        trades_with_partials=with_partials,
        avg_partial_count=total_partials / with_partials if with_partials else 0.0,
        trades_with_adds=with_adds,
        avg_adds=total_adds / with_adds if with_adds else 0.0,
    )
    logger.debug("Exit summary: %s", summary)
    return summary
