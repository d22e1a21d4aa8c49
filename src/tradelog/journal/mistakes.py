"""Mistake cost — what breaking the trading plan has cost.

Classifies closed trades by behaviour that the trader's own rules call
a mistake, and totals the PnL of each class:

- Rule violations (``rule_compliance`` explicitly false)
- No entry reason written down
- Oversized risk (more than 3 % of the account at stake)
- Tagged violations (any ``violation_tags`` entry)

Rule violations and missing entry reasons are always reported.  The
last two are reported only when, taken together, they lost money:
a large-risk trade that paid off is not shown as a cost.

Usage::

    report = analyze_mistakes(trades, config)
    for m in report.mistakes:
        print(m.label, m.count, -m.cost)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from tradelog.core.config import AnalyticsConfig
from tradelog.core.enums import TradePhase

from .metrics import balance_for, effective_entry_price, net_pnl, resolve_risk
from .record import TradeRecord

logger = logging.getLogger(__name__)

# Risk above this share of the account balance (percent) is oversized
OVERSIZED_RISK_PERCENT = 3.0

_DEFAULT_CONFIG = AnalyticsConfig()


@dataclass(frozen=True)
class MistakeCost:
    """Cost of one kind of mistake across a journal."""

    mistake_type: str       # e.g. "rule_violation", "oversized_risk"
    label: str              # Human-readable name
    count: int
    cost: float             # Absolute PnL of the affected trades
    avg_cost: float


@dataclass(frozen=True)
class MistakeReport:
    """Mistakes ordered by cost, most expensive first."""

    mistakes: tuple[MistakeCost, ...] = ()

    @property
    def total_cost(self) -> float:
        return sum(m.cost for m in self.mistakes)

    @property
    def is_clean(self) -> bool:
        return not self.mistakes


def risk_percent(trade: TradeRecord, config: AnalyticsConfig = _DEFAULT_CONFIG) -> float:
    """Dollar risk as a percent of the trade's balance; 0 without a stop."""
    risk = resolve_risk(trade, effective_entry_price(trade))
    balance = balance_for(trade, config)
    if risk is None or balance <= 0:
        return 0.0
    return risk / balance * 100


@dataclass(frozen=True)
class _MistakeRule:
    mistake_type: str
    label: str
    matches: Callable[[TradeRecord, AnalyticsConfig], bool]
    losses_only: bool


MISTAKE_RULES: tuple[_MistakeRule, ...] = (
    _MistakeRule(
        "rule_violation", "Rule Violations",
        lambda t, cfg: t.rule_compliance is False,
        losses_only=False,
    ),
    _MistakeRule(
        "no_entry_reason", "No Entry Reason",
        lambda t, cfg: not t.entry_reason.strip(),
        losses_only=False,
    ),
    _MistakeRule(
        "oversized_risk", "Oversized Risk (>3%)",
        lambda t, cfg: risk_percent(t, cfg) > OVERSIZED_RISK_PERCENT,
        losses_only=True,
    ),
    _MistakeRule(
        "tagged_violation", "Tagged Violations",
        lambda t, cfg: bool(t.violation_tags.strip()),
        losses_only=True,
    ),
)


def analyze_mistakes(
    trades: Iterable[TradeRecord],
    config: AnalyticsConfig = _DEFAULT_CONFIG,
) -> MistakeReport:
    """Cost every mistake class over the closed trades of ``trades``."""
    closed = [t for t in trades if t.phase is TradePhase.CLOSED]

    mistakes = []
    for rule in MISTAKE_RULES:
        hits = [t for t in closed if rule.matches(t, config)]
        if not hits:
            continue
        total = sum(net_pnl(t) for t in hits)
        if rule.losses_only and total >= 0:
            continue
        cost = abs(total)
        mistakes.append(MistakeCost(
            mistake_type=rule.mistake_type,
            label=rule.label,
            count=len(hits),
            cost=cost,
            avg_cost=cost / len(hits),
        ))
    mistakes.sort(key=lambda m: m.cost, reverse=True)

    if mistakes:
        logger.debug(
            "Mistake cost %.2f across %d classes",
            sum(m.cost for m in mistakes), len(mistakes),
        )
    return MistakeReport(tuple(mistakes))
