"""
Trade, draft and settings models.

These dataclasses represent the records kept in the trading journal.
A `Trade` carries both the values entered by the user and the fields
derived from them (net P&L, return percentage and the absolute
timestamp).  Trades are frozen: changing one means building a
replacement, which always goes through `with_derived_fields()` so the
derived fields can never drift from the inputs.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional

import pandas as pd

from ..utils.timeutils import combine_date_time, to_timezone, utc_now


MOODS = ("Confident", "Neutral", "Anxious", "Frustrated", "Uncertain")

LABELS = (
    "Scalping",
    "Day Trading",
    "Swing Trading",
    "Position Trading",
    "Breakout",
    "Reversal",
    "Trend Following",
    "Counter Trend",
    "News Trading",
    "Technical Analysis",
)


class TradeType(str, Enum):
    """Trade direction.  Controls the sign of the P&L."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Settings:
    """Account settings shared by every calculation.

    Attributes
    ----------
    initial_capital : float
        Starting account balance.
    commission : float
        Flat commission charged per trade at account level.
    swap_fee : float
        Flat swap fee charged per trade at account level.
    """

    initial_capital: float = 10_000.0
    commission: float = 0.0
    swap_fee: float = 0.0

    def merged(self, **changes: Any) -> "Settings":
        """Return a copy with the given fields replaced.

        Raises
        ------
        TypeError
            If a field name is unknown.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise TypeError(f"Unknown settings field(s): {', '.join(unknown)}")
        return replace(self, **{k: float(v) for k, v in changes.items()})


@dataclass(frozen=True)
class TradeDraft:
    """A trade as entered by the user, before derived fields exist."""
    instrument: str
    type: TradeType
    entry_price: float
    exit_price: float
    quantity: float
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    commission: float = 0.0
    swap: float = 0.0
    notes: str = ""
    mood: str = ""
    label: str = ""


@dataclass(frozen=True)
class Trade:
    """A journal entry with its derived P&L fields."""
    id: str
    instrument: str
    type: TradeType
    entry_price: float
    exit_price: float
    quantity: float
    date: str
    time: str
    commission: float
    swap: float
    notes: str
    mood: str
    label: str
    pnl: float
    percentage: float
    timestamp: pd.Timestamp
    created_at: pd.Timestamp

    @property
    def notional(self) -> float:
        return self.entry_price * self.quantity

    @property
    def gross_pnl(self) -> float:
        return self.pnl + self.commission + self.swap


def compute_pnl(
    trade_type: TradeType,
    entry_price: float,
    exit_price: float,
    quantity: float,
    commission: float = 0.0,
    swap: float = 0.0,
) -> float:
    """Compute the net profit or loss of a trade.

    For buys, gross P&L = (exit_price - entry_price) * quantity.
    For sells, gross P&L = (entry_price - exit_price) * quantity.
    Commission and swap are subtracted from the gross figure.
    """
    side = TradeType(trade_type)
    if side is TradeType.BUY:
        gross = (exit_price - entry_price) * quantity
    elif side is TradeType.SELL:
        gross = (entry_price - exit_price) * quantity
    else:
        raise ValueError(f"Unsupported trade type: {trade_type!r}")
    return gross - commission - swap


def compute_percentage(pnl: float, entry_price: float, quantity: float) -> float:
    """Express `pnl` as a percentage of the entry notional.

    Returns 0.0 when the notional is zero.
    """
    notional = entry_price * quantity
    if notional == 0:
        return 0.0
    return pnl / notional * 100


def _derive(trade_type, entry_price, exit_price, quantity, commission, swap):
    pnl = compute_pnl(trade_type, entry_price, exit_price, quantity, commission, swap)
    return pnl, compute_percentage(pnl, entry_price, quantity)


def create_trade(
    draft: TradeDraft,
    timezone: str,
    trade_id: Optional[str] = None,
    created_at: Optional[pd.Timestamp] = None,
) -> Trade:
    """Build a new `Trade` from a draft.

    Parameters
    ----------
    draft : TradeDraft
        User supplied values.  Assumed valid (positive prices and quantity).
    timezone : str
        IANA timezone the draft's date and time are expressed in.
    trade_id : str, optional
        Identifier to use.  A random one is generated when omitted.
    created_at : pandas.Timestamp, optional
        Creation instant.  Defaults to now (UTC).
    """
    side = TradeType(draft.type)
    pnl, percentage = _derive(
        side, draft.entry_price, draft.exit_price, draft.quantity, draft.commission, draft.swap
    )
    return Trade(
        id=trade_id or uuid.uuid4().hex,
        instrument=draft.instrument,
        type=side,
        entry_price=draft.entry_price,
        exit_price=draft.exit_price,
        quantity=draft.quantity,
        date=draft.date,
        time=draft.time,
        commission=draft.commission,
        swap=draft.swap,
        notes=draft.notes,
        mood=draft.mood,
        label=draft.label,
        pnl=pnl,
        percentage=percentage,
        timestamp=combine_date_time(draft.date, draft.time, timezone),
        created_at=created_at if created_at is not None else utc_now(),
    )


def with_derived_fields(trade: Trade, timezone: str) -> Trade:
    """Recompute `pnl`, `percentage` and `timestamp` of a replacement trade.

    `id` and `created_at` are kept as they are.
    """
    side = TradeType(trade.type)
    pnl, percentage = _derive(
        side, trade.entry_price, trade.exit_price, trade.quantity, trade.commission, trade.swap
    )
    return replace(
        trade,
        type=side,
        pnl=pnl,
        percentage=percentage,
        timestamp=combine_date_time(trade.date, trade.time, timezone),
    )


def trade_to_dict(trade: Trade) -> Dict[str, Any]:
    """Serialise a trade into JSON‑compatible primitives."""
    data = asdict(trade)
    data['type'] = trade.type.value
    data['timestamp'] = trade.timestamp.isoformat()
    data['created_at'] = trade.created_at.isoformat()
    return data


def trade_from_dict(data: Dict[str, Any], timezone: str) -> Trade:
    """Rebuild a trade from `trade_to_dict()` output.

    Derived fields are recomputed rather than trusted.

    Raises
    ------
    KeyError, ValueError, TypeError
        If a required field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Trade record must be an object, got {type(data).__name__}")
    trade = Trade(
        id=str(data['id']),
        instrument=str(data['instrument']),
        type=TradeType(data['type']),
        entry_price=float(data['entry_price']),
        exit_price=float(data['exit_price']),
        quantity=float(data['quantity']),
        date=str(data['date']),
        time=str(data['time']),
        commission=float(data.get('commission', 0.0)),
        swap=float(data.get('swap', 0.0)),
        notes=str(data.get('notes') or ""),
        mood=str(data.get('mood') or ""),
        label=str(data.get('label') or ""),
        pnl=0.0,
        percentage=0.0,
        timestamp=pd.NaT,  # rebuilt from date and time below
        created_at=(
            to_timezone(pd.Timestamp(data['created_at']), "UTC")
            if data.get('created_at')
            else utc_now()
        ),
    )
    return with_derived_fields(trade, timezone)


def settings_to_dict(settings: Settings) -> Dict[str, float]:
    return asdict(settings)


def settings_from_dict(data: Dict[str, Any], defaults: Optional[Settings] = None) -> Settings:
    """Build settings from a stored object, filling gaps from `defaults`.

    Unknown keys are ignored.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Settings must be an object, got {type(data).__name__}")
    base = defaults or Settings()
    known = {f.name for f in fields(Settings)}
    return base.merged(**{k: v for k, v in data.items() if k in known})
