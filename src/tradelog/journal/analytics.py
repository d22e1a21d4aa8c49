"""Report facade — every journal analytic from one call.

Composes the calculators for a single trade set and config: per-trade
metrics and exit types, portfolio aggregates, equity curve, drawdown,
open-book exposure, discipline, the local-day PnL calendar, the
per-symbol and per-strategy breakdowns and the cost of mistakes.  Holds
no state between calls.

Usage::

    analytics = JournalAnalytics(AnalyticsConfig(timezone="Europe/Moscow"))
    report = analytics.report_from_dicts(rows)
    report.aggregate.winrate, report.drawdown.percent
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from tradelog.core.config import AnalyticsConfig
from tradelog.core.enums import ExitType
from tradelog.observability.logger import get_logger, run_context

from .aggregate import AggregateMetrics, aggregate_metrics
from .breakdown import GroupStats, breakdown_by_strategy, breakdown_by_symbol
from .calendar import DailyBucket, bucket_daily_pnl
from .discipline import DisciplineScore, score_discipline
from .drawdown import DrawdownResult, analyze_drawdown
from .equity import EquityPoint, build_equity_curve
from .exits import ExitSummary, classify_exit, summarize_exits
from .exposure import OpenExposure, aggregate_open_exposure
from .ingest import trades_from_dicts
from .metrics import TradeMetrics, compute_trade_metrics
from .mistakes import MistakeReport, analyze_mistakes
from .record import TradeRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    """All derived value objects for one trade set."""

    config: AnalyticsConfig
    trade_metrics: dict[str, TradeMetrics] = field(default_factory=dict)
    exit_types: dict[str, ExitType] = field(default_factory=dict)
    aggregate: AggregateMetrics = field(default_factory=AggregateMetrics)
    exits: ExitSummary = field(default_factory=ExitSummary)
    equity_curve: list[EquityPoint] = field(default_factory=list)
    drawdown: DrawdownResult = field(default_factory=DrawdownResult)
    open_exposure: OpenExposure = field(default_factory=OpenExposure)
    discipline: DisciplineScore = field(default_factory=DisciplineScore)
    daily: dict[str, DailyBucket] = field(default_factory=dict)
    symbols: list[GroupStats] = field(default_factory=list)
    strategies: list[GroupStats] = field(default_factory=list)
    mistakes: MistakeReport = field(default_factory=MistakeReport)

    @property
    def current_balance(self) -> float:
        if not self.equity_curve:
            return self.config.starting_balance
        return self.equity_curve[-1].equity


class JournalAnalytics:
    """Compute a full :class:`AnalyticsReport`.

    Parameters
    ----------
    config : AnalyticsConfig | None
        Engine configuration.  Defaults: 100 000 balance, UTC, 0.5 USD /
        0.01 % breakeven band.
    """

    def __init__(self, config: AnalyticsConfig | None = None) -> None:
        self._config = config or AnalyticsConfig()

    @property
    def config(self) -> AnalyticsConfig:
        return self._config

    def report(
        self,
        trades: Iterable[TradeRecord],
        *,
        current_balance: float | None = None,
    ) -> AnalyticsReport:
        """Run every calculator over ``trades``.

        ``current_balance`` sizes the open-book percentages; it defaults
        to the final equity of the realized curve.
        """
        cfg = self._config
        trades = list(trades)

        with run_context(trades=len(trades)):
            curve = build_equity_curve(trades, cfg.starting_balance)
            balance = current_balance if current_balance is not None else curve[-1].equity

            report = AnalyticsReport(
                config=cfg,
                trade_metrics={
                    t.trade_id: compute_trade_metrics(t, cfg) for t in trades
                },
                exit_types={t.trade_id: classify_exit(t, cfg) for t in trades},
                aggregate=aggregate_metrics(trades, cfg),
                exits=summarize_exits(trades, cfg),
                equity_curve=curve,
                drawdown=analyze_drawdown(curve, cfg.starting_balance),
                open_exposure=aggregate_open_exposure(trades, balance),
                discipline=score_discipline(trades),
                daily=bucket_daily_pnl(trades, cfg.timezone, cfg.starting_balance),
                symbols=breakdown_by_symbol(trades, cfg),
                strategies=breakdown_by_strategy(trades, cfg),
                mistakes=analyze_mistakes(trades, cfg),
            )

            logger.info(
                "journal_report",
                closed=report.aggregate.trades_count,
                open=report.open_exposure.count,
                net_pnl_usd=round(report.aggregate.net_pnl_usd, 2),
                winrate=round(report.aggregate.winrate, 2),
                max_drawdown_pct=round(report.drawdown.percent, 2),
                discipline=report.discipline.score,
                mistake_cost=round(report.mistakes.total_cost, 2),
            )
        return report

    def report_from_dicts(
        self,
        rows: Iterable[Mapping[str, Any]],
        *,
        current_balance: float | None = None,
    ) -> AnalyticsReport:
        """Ingest raw persistence rows, then :meth:`report`."""
        return self.report(trades_from_dicts(rows), current_balance=current_balance)
