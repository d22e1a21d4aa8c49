"""Per-symbol and per-strategy performance breakdown.

Groups closed trades by a key (coin, strategy tag) and runs the
portfolio statistics on each group, then classifies every group so the
trader knows where to focus and what to stop trading.  Answers
questions like "Is SOL worth trading?" or "Which setup has an edge?"

Usage::

    for group in breakdown_by_symbol(trades, config):
        print(group.key, group.classification, group.stats.winrate)
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from tradelog.core.config import AnalyticsConfig

from .aggregate import AggregateMetrics, aggregate_metrics
from .record import TradeRecord

logger = logging.getLogger(__name__)

UNKNOWN_SYMBOL = "Unknown"
NO_STRATEGY = "No Strategy"

# Group classifications
ELITE = "elite"
PROFITABLE = "profitable"
NEUTRAL = "neutral"
AVOID = "avoid"

_DEFAULT_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class GroupStats:
    """Statistics for one group of closed trades."""

    key: str
    stats: AggregateMetrics
    classification: str
    edge_score: float


def symbol_key(trade: TradeRecord) -> str:
    """Base asset of the trade: ``BTCUSDT`` and ``BTC`` group together."""
    return trade.coin.strip().upper().removesuffix("USDT") or UNKNOWN_SYMBOL


def strategy_key(trade: TradeRecord) -> str:
    return trade.strategy_tag.strip() or NO_STRATEGY


def classify_group(stats: AggregateMetrics) -> str:
    if stats.expectancy < 0 or stats.avg_r < 0:
        return AVOID
    if stats.avg_r >= 2 and stats.winrate >= 50:
        return ELITE
    if stats.avg_r >= 1:
        return PROFITABLE
    return NEUTRAL


def edge_score(stats: AggregateMetrics) -> float:
    """Average R scaled by sample size, damped for small samples.

    Under 20 trades the score is halved, under 50 it is cut by 20 %.
    """
    n = stats.trades_count
    if n == 0:
        return 0.0
    penalty = 0.5 if n < 20 else 0.8 if n < 50 else 1.0
    return stats.avg_r * math.sqrt(n) * penalty


def breakdown_by(
    trades: Iterable[TradeRecord],
    key: Callable[[TradeRecord], str],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> list[GroupStats]:
    """Group closed trades by ``key``, best net PnL first.

    Ties in net PnL keep first-seen group order.
    """
    groups: dict[str, list[TradeRecord]] = defaultdict(list)
    for trade in trades:
        if trade.is_closed:
            groups[key(trade)].append(trade)

    result = []
    for name, members in groups.items():
        stats = aggregate_metrics(members, config)
        result.append(GroupStats(
            key=name,
            stats=stats,
            classification=classify_group(stats),
            edge_score=edge_score(stats),
        ))
    result.sort(key=lambda g: g.stats.net_pnl_usd, reverse=True)

    logger.debug("Broke down %d groups", len(result))
    return result


def breakdown_by_symbol(
    trades: Iterable[TradeRecord],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> list[GroupStats]:
    return breakdown_by(trades, symbol_key, config)


def breakdown_by_strategy(
    trades: Iterable[TradeRecord],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> list[GroupStats]:
    return breakdown_by(trades, strategy_key, config)
