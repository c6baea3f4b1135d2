"""
Equity curve construction.

The equity curve is the running account balance after each trade, in
chronological order.  It is rebuilt from scratch on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..journal.models import Settings, Trade
from ..utils.timeutils import short_day_label

START_LABEL = "Start"


@dataclass(frozen=True)
class EquityPoint:
    """Account equity after the `trade_index`-th trade (0 is the start)."""
    date: str
    equity: float
    trade_index: int


def build_equity_curve(trades: Sequence[Trade], settings: Settings) -> List[EquityPoint]:
    """Build the equity curve for the journal.

    Trades are ordered by timestamp; trades with the same timestamp keep
    their insertion order.  The curve starts with a synthetic ``Start``
    point at the initial capital, followed by one point per trade.  Each
    step adds the trade's net P&L and subtracts the account-level
    commission and swap fee.
    """
    equity = settings.initial_capital
    curve = [EquityPoint(date=START_LABEL, equity=equity, trade_index=0)]
    for index, trade in enumerate(sorted(trades, key=lambda t: t.timestamp), start=1):
        equity += trade.pnl - settings.commission - settings.swap_fee
        curve.append(
            EquityPoint(date=short_day_label(trade.timestamp), equity=equity, trade_index=index)
        )
    return curve
