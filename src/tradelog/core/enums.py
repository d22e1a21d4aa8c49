"""Enumerations used across the journal analytics engine."""

from enum import Enum


class Direction(str, Enum):
    LONG = "Long"
    SHORT = "Short"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LONG else -1


class TradePhase(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class TradeOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class ExitType(str, Enum):
    OPEN = "Open"
    BREAKEVEN = "Breakeven"
    STOP = "Stop"
    TAKE = "Take"
    MANUAL = "Manual"


class ParseStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    MALFORMED = "malformed"


class EventKind(str, Enum):
    """Source of a realized PnL event."""

    START = "start"
    CLOSE = "close"
    PARTIAL = "partial"
