"""Discipline score — how completely the journal is kept.

An open trade is complete when it was planned: strategy, timeframe,
confidence, entry reason, stop and target are all filled in.  A closed
trade is complete when it was reviewed: a written analysis and a
violation-tags entry exist.  Only presence is scored, not content; a
trader who tags "none" has still done the review.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .record import TradeRecord


@dataclass(frozen=True)
class DisciplineScore:
    score: int = 0          # 0..100
    complete_count: int = 0
    total_count: int = 0
    open_complete: int = 0
    closed_complete: int = 0


def missing_fields(trade: TradeRecord) -> list[str]:
    """Names of the fields that keep ``trade`` from being complete."""
    if trade.is_closed:
        checks = {
            "trade_analysis": bool(trade.trade_analysis.strip()),
            "violation_tags": bool(trade.violation_tags.strip()),
        }
    else:
        checks = {
            "strategy_tag": bool(trade.strategy_tag.strip()),
            "timeframe": bool(trade.timeframe.strip()),
            "confidence_level": (trade.confidence_level or 0) > 0,
            "entry_reason": bool(trade.entry_reason.strip()),
            "stop_price": trade.has_stop,
            "take_price": trade.has_take,
        }
    return [name for name, present in checks.items() if not present]


def is_complete(trade: TradeRecord) -> bool:
    return not missing_fields(trade)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def score_discipline(trades: Iterable[TradeRecord]) -> DisciplineScore:
    total = open_ok = closed_ok = 0
    for trade in trades:
        total += 1
        if is_complete(trade):
            if trade.is_closed:
                closed_ok += 1
            else:
                open_ok += 1

    if total == 0:
        return DisciplineScore()
    complete = open_ok + closed_ok
    return DisciplineScore(
        score=_round_half_up(complete / total * 100),
        complete_count=complete,
        total_count=total,
        open_complete=open_ok,
        closed_complete=closed_ok,
    )


def discipline_score(trades: Iterable[TradeRecord]) -> int:
    """The 0..100 score alone."""
    return score_discipline(trades).score
