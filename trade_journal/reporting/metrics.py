"""
Performance statistics calculations.

This module derives the summary statistics shown on the journal
dashboard from the full trade log and the account settings.  The
functions are pure: the same trades and settings always produce the
same `Statistics`.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Sequence

from ..journal.models import Settings, Trade
from .equity import EquityPoint


@dataclass(frozen=True)
class Statistics:
    """Aggregate performance of the trade log.

    Percentages (`total_return`, `win_rate`) are expressed in percent.
    `profit_factor` and `risk_reward_ratio` are `math.inf` when there
    are gains but nothing to divide them by.
    """

    total_return: float = 0.0
    win_rate: float = 0.0
    total_trades: int = 0
    profit_factor: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    risk_reward_ratio: float = 0.0
    total_profit: float = 0.0
    total_loss: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    current_equity: float = 0.0
    initial_equity: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning inf for a positive numerator over zero and 0.0 otherwise."""
    if denominator > 0:
        return numerator / denominator
    return math.inf if numerator > 0 else 0.0


def compute_statistics(trades: Sequence[Trade], settings: Settings) -> Statistics:
    """Compute summary statistics for the journal.

    Parameters
    ----------
    trades : sequence of Trade
        Every trade in the journal.  Each `pnl` is already net of the
        trade's own commission and swap.
    settings : Settings
        Account settings.  The account-level commission and swap fee are
        charged once more per trade on top of the per-trade fees.

    Returns
    -------
    Statistics
        The derived statistics.  With no trades every figure is zero and
        both equity values equal the initial capital.
    """
    initial_capital = settings.initial_capital
    if not trades:
        return Statistics(current_equity=initial_capital, initial_equity=initial_capital)

    wins = [t.pnl for t in trades if t.pnl > 0]
    losses = [t.pnl for t in trades if t.pnl < 0]
    total_trades = len(trades)

    total_profit = sum(wins)
    total_loss = abs(sum(losses))
    total_fees = total_trades * (settings.commission + settings.swap_fee)

    avg_win = total_profit / len(wins) if wins else 0.0
    avg_loss = total_loss / len(losses) if losses else 0.0

    current_equity = initial_capital + total_profit - total_loss - total_fees
    total_return = (current_equity - initial_capital) / initial_capital * 100 if initial_capital else 0.0

    return Statistics(
        total_return=total_return,
        win_rate=len(wins) / total_trades * 100,
        total_trades=total_trades,
        profit_factor=_safe_ratio(total_profit, total_loss),
        avg_win=avg_win,
        avg_loss=avg_loss,
        risk_reward_ratio=_safe_ratio(avg_win, avg_loss),
        total_profit=total_profit,
        total_loss=total_loss,
        winning_trades=len(wins),
        losing_trades=len(losses),
        current_equity=current_equity,
        initial_equity=initial_capital,
    )


def compute_max_drawdown(equity_curve: Sequence[EquityPoint]) -> float:
    """Largest peak-to-trough decline of the curve, as a fraction of the peak."""
    if not equity_curve:
        return 0.0
    max_equity = equity_curve[0].equity
    max_drawdown = 0.0
    for point in equity_curve:
        if point.equity > max_equity:
            max_equity = point.equity
        drawdown = (max_equity - point.equity) / max_equity if max_equity > 0 else 0.0
        if drawdown > max_drawdown:
            max_drawdown = drawdown
    return max_drawdown
