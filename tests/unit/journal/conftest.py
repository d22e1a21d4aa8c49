"""Shared trade factories for journal tests."""

from datetime import datetime, timedelta, timezone

import pytest

from tradelog.core.enums import Direction
from tradelog.journal.record import AddLeg, PartialClose, TradeRecord

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time():
    return BASE_TIME


def make_trade(
    trade_id: str = "t1",
    coin: str = "BTC",
    direction: Direction = Direction.LONG,
    entry_price: float = 100.0,
    position_size: float = 1000.0,
    close_price: float | None = None,
    stop_price: float | None = None,
    take_price: float | None = None,
    pnl_usd: float | None = None,
    date_open: datetime | None = None,
    date_close: datetime | None = None,
    **kwargs,
) -> TradeRecord:
    """Helper to create a TradeRecord with sensible defaults."""
    return TradeRecord(
        trade_id=trade_id,
        coin=coin,
        direction=direction,
        entry_price=entry_price,
        position_size=position_size,
        close_price=close_price,
        stop_price=stop_price,
        take_price=take_price,
        pnl_usd=pnl_usd,
        date_open=date_open or BASE_TIME,
        date_close=date_close,
        **kwargs,
    )


def make_closed_trade(
    pnl_usd: float,
    trade_id: str = "c1",
    closed_at: datetime | None = None,
    **kwargs,
) -> TradeRecord:
    """Closed trade with an explicit PnL, closed one hour after BASE_TIME."""
    kwargs.setdefault("close_price", 100.0)
    return make_trade(
        trade_id=trade_id,
        pnl_usd=pnl_usd,
        date_close=closed_at or BASE_TIME + timedelta(hours=1),
        **kwargs,
    )


def make_open_trade(
    trade_id: str = "o1",
    partials: list[tuple[float, datetime | None]] | None = None,
    **kwargs,
) -> TradeRecord:
    """Open trade, optionally with (pnl, timestamp) partial closes."""
    return make_trade(
        trade_id=trade_id,
        partial_closes=[PartialClose(pnl, ts) for pnl, ts in (partials or [])],
        **kwargs,
    )


def make_add(price: float, size_usd: float) -> AddLeg:
    return AddLeg(price=price, size_usd=size_usd, timestamp=BASE_TIME)
