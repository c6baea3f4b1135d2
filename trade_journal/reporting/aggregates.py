"""
Monthly, per-instrument and per-day breakdowns of the trade log.

Every function here recomputes its result from the full list of trades.
Months are taken from the trade's local timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..journal.models import Trade
from ..utils.timeutils import month_label


@dataclass
class MonthlyPerformance:
    """Profit and loss of the trades closed in one calendar month.

    `loss` is kept negative (sum of the non-positive P&L values).
    """
    year: int
    month: int
    profit: float = 0.0
    loss: float = 0.0
    net: float = 0.0
    trade_count: int = 0

    @property
    def label(self) -> str:
        return month_label(self.year, self.month)


@dataclass
class InstrumentPerformance:
    """Performance of all trades on one instrument."""
    instrument: str
    trade_count: int = 0
    pnl: float = 0.0
    win_rate: float = 0.0  # percent
    total_volume: float = 0.0


@dataclass(frozen=True)
class DayData:
    """Trades recorded against one date and their summed results."""
    date: str
    trades: Tuple[Trade, ...]
    total_pnl: float
    total_percentage: float


def monthly_performance(trades: Sequence[Trade]) -> List[MonthlyPerformance]:
    """Group trades by calendar month, oldest month first."""
    months: Dict[Tuple[int, int], MonthlyPerformance] = {}
    for trade in trades:
        key = (trade.timestamp.year, trade.timestamp.month)
        entry = months.get(key)
        if entry is None:
            entry = months[key] = MonthlyPerformance(year=key[0], month=key[1])
        entry.trade_count += 1
        if trade.pnl > 0:
            entry.profit += trade.pnl
        else:
            entry.loss += trade.pnl
        entry.net += trade.pnl
    return [months[key] for key in sorted(months)]


def instrument_performance(trades: Sequence[Trade]) -> List[InstrumentPerformance]:
    """Group trades by instrument, most profitable instrument first.

    Instruments with equal P&L keep the order in which they first appear.
    """
    groups: Dict[str, InstrumentPerformance] = {}
    wins: Dict[str, int] = {}
    for trade in trades:
        entry = groups.get(trade.instrument)
        if entry is None:
            entry = groups[trade.instrument] = InstrumentPerformance(instrument=trade.instrument)
            wins[trade.instrument] = 0
        entry.trade_count += 1
        entry.pnl += trade.pnl
        entry.total_volume += trade.entry_price * trade.quantity
        if trade.pnl > 0:
            wins[trade.instrument] += 1

    for instrument, entry in groups.items():
        entry.win_rate = wins[instrument] / entry.trade_count * 100
    return sorted(groups.values(), key=lambda e: e.pnl, reverse=True)


def trades_on(trades: Sequence[Trade], date: str) -> List[Trade]:
    """Return the trades whose date string equals `date` exactly."""
    return [t for t in trades if t.date == date]


def day_data(trades: Sequence[Trade], date: str) -> Optional[DayData]:
    """Summarise the trades of one day, or `None` if there are none.

    The percentage is the plain sum of the individual trade percentages.
    """
    matching = trades_on(trades, date)
    if not matching:
        return None
    return DayData(
        date=date,
        trades=tuple(matching),
        total_pnl=sum(t.pnl for t in matching),
        total_percentage=sum(t.percentage for t in matching),
    )
