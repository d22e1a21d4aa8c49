"""Maximum drawdown from an equity curve.

Tracks the running equity peak (seeded with the starting balance, so a
journal that only ever loses still shows a drawdown) and reports the
deepest decline below it, in dollars and percent.  Peak only rises.

The dollar and percent maxima are tracked independently: a deep dollar
drawdown from a high peak can be a smaller percentage than an earlier,
shallower one.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass

from tradelog.core.config import DEFAULT_STARTING_BALANCE

from .equity import EquityPoint


@dataclass(frozen=True)
class DrawdownResult:
    """Deepest peak-to-trough decline.  Both magnitudes are >= 0.

    ``percent`` is in percent units (6.67 means 6.67%).  ``peak_equity``
    and ``trough_equity`` bound the deepest dollar drawdown.
    """

    percent: float = 0.0
    usd: float = 0.0
    peak_equity: float = 0.0
    trough_equity: float = 0.0


@dataclass(frozen=True)
class _DrawdownState:
    peak: float
    worst_fraction: float = 0.0   # <= 0
    worst_usd: float = 0.0        # <= 0
    worst_peak: float = 0.0
    worst_trough: float = 0.0


def _step(state: _DrawdownState, equity: float) -> _DrawdownState:
    peak = max(state.peak, equity)
    usd = equity - peak
    fraction = usd / peak if peak > 0 else 0.0

    worst_usd, worst_peak, worst_trough = state.worst_usd, state.worst_peak, state.worst_trough
    if usd < worst_usd:
        worst_usd, worst_peak, worst_trough = usd, peak, equity

    return _DrawdownState(
        peak=peak,
        worst_fraction=min(state.worst_fraction, fraction),
        worst_usd=worst_usd,
        worst_peak=worst_peak,
        worst_trough=worst_trough,
    )


def max_drawdown(
    equities: Iterable[float],
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> DrawdownResult:
    """Drawdown of a bare balance series."""
    initial = _DrawdownState(
        peak=starting_balance,
        worst_peak=starting_balance,
        worst_trough=starting_balance,
    )
    final = functools.reduce(_step, equities, initial)
    return DrawdownResult(
        percent=abs(final.worst_fraction) * 100,
        usd=abs(final.worst_usd),
        peak_equity=final.worst_peak,
        trough_equity=final.worst_trough,
    )


def analyze_drawdown(
    curve: Iterable[EquityPoint],
    starting_balance: float = DEFAULT_STARTING_BALANCE,
) -> DrawdownResult:
    """Drawdown of an equity curve built by :func:`build_equity_curve`."""
    return max_drawdown((point.equity for point in curve), starting_balance)
