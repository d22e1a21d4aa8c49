"""Trade journal analytics.

Pure calculators that turn journal trade records into per-trade and
portfolio analytics.  Each takes the trades (and config) and returns a
frozen value object; none mutates its input or keeps state.

Key components
--------------
TradeRecord           Input record (decoded by ``trade_from_dict``)
compute_trade_metrics Net PnL, effective entry, risk, R-multiple
classify_exit         Stop / Take / Breakeven / Manual / Open
aggregate_metrics     Winrate, profit factor, expectancy, average R
build_equity_curve    Chronological balance series
analyze_drawdown      Peak-to-trough decline
aggregate_open_exposure  Risk / reward of the open book
score_discipline      Journal completeness score
bucket_daily_pnl      Local-day PnL calendar
breakdown_by_symbol   Per-symbol / per-strategy stats and classification
analyze_mistakes      Cost of rule violations and other mistakes
JournalAnalytics      Facade producing a full AnalyticsReport
"""

from .aggregate import PROFIT_FACTOR_NA, AggregateMetrics, aggregate_metrics
from .analytics import AnalyticsReport, JournalAnalytics
from .breakdown import GroupStats, breakdown_by, breakdown_by_strategy, breakdown_by_symbol
from .calendar import DailyBucket, bucket_daily_pnl
from .discipline import DisciplineScore, discipline_score, missing_fields, score_discipline
from .drawdown import DrawdownResult, analyze_drawdown, max_drawdown
from .equity import EquityPoint, build_equity_curve
from .exits import ExitSummary, classify_exit, summarize_exits
from .exposure import NO_RISK, OpenExposure, aggregate_open_exposure
from .ingest import LegParse, decode_legs, trade_from_dict, trades_from_dicts
from .metrics import TradeMetrics, compute_trade_metrics, is_breakeven
from .mistakes import MistakeCost, MistakeReport, analyze_mistakes
from .record import AddLeg, PartialClose, TradeRecord

__all__ = [
    "PROFIT_FACTOR_NA",
    "NO_RISK",
    "AddLeg",
    "PartialClose",
    "TradeRecord",
    "LegParse",
    "decode_legs",
    "trade_from_dict",
    "trades_from_dicts",
    "TradeMetrics",
    "compute_trade_metrics",
    "is_breakeven",
    "classify_exit",
    "ExitSummary",
    "summarize_exits",
    "AggregateMetrics",
    "aggregate_metrics",
    "EquityPoint",
    "build_equity_curve",
    "DrawdownResult",
    "analyze_drawdown",
    "max_drawdown",
    "OpenExposure",
    "aggregate_open_exposure",
    "DisciplineScore",
    "discipline_score",
    "missing_fields",
    "score_discipline",
    "DailyBucket",
    "bucket_daily_pnl",
    "GroupStats",
    "breakdown_by",
    "breakdown_by_symbol",
    "breakdown_by_strategy",
    "MistakeCost",
    "MistakeReport",
    "analyze_mistakes",
    "AnalyticsReport",
    "JournalAnalytics",
]
