"""
Position sizing from a fixed account risk.

Given the account balance, the share of it the trader is willing to
lose and the distance between entry and stop-loss, compute the
position size that loses exactly that amount if the stop is hit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RiskCalculation:
    """Inputs and results of a position-size calculation."""
    account_balance: float
    risk_percentage: float
    entry_price: float
    stop_loss: float
    take_profit: Optional[float] = None
    position_size: float = 0.0
    risk_amount: float = 0.0
    reward_amount: float = 0.0
    risk_reward_ratio: float = 0.0


def calculate_risk(
    account_balance: float,
    risk_percentage: float,
    entry_price: float,
    stop_loss: float,
    take_profit: Optional[float] = None,
) -> RiskCalculation:
    """Compute position size and reward for a planned trade.

    Parameters
    ----------
    account_balance : float
        Current account balance.
    risk_percentage : float
        Percentage of the balance risked on the trade (``2`` for 2 %).
    entry_price, stop_loss : float
        Planned entry and stop-loss prices.
    take_profit : float, optional
        Planned take-profit price.  Enables the reward figures.

    Returns
    -------
    RiskCalculation
        Derived values stay at zero while any of balance, risk,
        entry or stop is missing (zero).
    """
    result = RiskCalculation(
        account_balance=account_balance,
        risk_percentage=risk_percentage,
        entry_price=entry_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
    )
    if not (account_balance and risk_percentage and entry_price and stop_loss):
        return result

    risk_amount = account_balance * risk_percentage / 100
    distance = abs(entry_price - stop_loss)
    position_size = risk_amount / distance if distance > 0 else 0.0

    reward_amount = 0.0
    ratio = 0.0
    if take_profit:
        reward_amount = abs(take_profit - entry_price) * position_size
        ratio = reward_amount / risk_amount if risk_amount > 0 else 0.0

    return RiskCalculation(
        account_balance=account_balance,
        risk_percentage=risk_percentage,
        entry_price=entry_price,
        stop_loss=stop_loss,
        take_profit=take_profit,
        position_size=position_size,
        risk_amount=risk_amount,
        reward_amount=reward_amount,
        risk_reward_ratio=ratio,
    )
