"""
Trading store.

`TradingStore` owns the trade log and the account settings.  Every
mutation produces a new immutable `TradingState` snapshot in which all
derived views (statistics, equity curve, monthly and per-instrument
breakdowns) have been recomputed from the full log.  Snapshots are
published to subscribers and the changed data is written to the blob
store on a best-effort basis: storage failures are logged and never
interrupt the in-memory state transition.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config.schema import Config
from ..reporting.aggregates import (
    DayData,
    InstrumentPerformance,
    MonthlyPerformance,
    day_data,
    instrument_performance,
    monthly_performance,
    trades_on,
)
from ..reporting.equity import EquityPoint, build_equity_curve
from ..reporting.metrics import Statistics, compute_statistics
from ..utils.persistence import BlobStore
from .models import (
    Settings,
    Trade,
    TradeDraft,
    create_trade,
    settings_from_dict,
    settings_to_dict,
    trade_from_dict,
    trade_to_dict,
    with_derived_fields,
)


logger = logging.getLogger(__name__)

Subscriber = Callable[["TradingState"], None]


class StoreStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


@dataclass(frozen=True)
class TradingState:
    """Read-only snapshot of the journal and its derived views."""
    trades: Tuple[Trade, ...]
    statistics: Statistics
    equity_data: Tuple[EquityPoint, ...]
    monthly_performance: Tuple[MonthlyPerformance, ...]
    instrument_performance: Tuple[InstrumentPerformance, ...]
    settings: Settings
    status: StoreStatus = StoreStatus.UNINITIALIZED

    @property
    def is_loading(self) -> bool:
        return self.status is StoreStatus.LOADING


def derive_state(
    trades: Tuple[Trade, ...],
    settings: Settings,
    status: StoreStatus = StoreStatus.READY,
) -> TradingState:
    """Compute a complete snapshot from a trade log and settings."""
    return TradingState(
        trades=trades,
        statistics=compute_statistics(trades, settings),
        equity_data=tuple(build_equity_curve(trades, settings)),
        monthly_performance=tuple(monthly_performance(trades)),
        instrument_performance=tuple(instrument_performance(trades)),
        settings=settings,
        status=status,
    )


class TradingStore:
    """Single owner of the trade log, settings and derived views.

    Parameters
    ----------
    storage : BlobStore
        Key-value backend the journal is loaded from and saved to.
    config : Config, optional
        Storage keys, timezone and default account settings.
    """

    def __init__(self, storage: BlobStore, config: Optional[Config] = None) -> None:
        self.storage = storage
        self.config = config or Config()
        self._subscribers: List[Subscriber] = []
        self._state = derive_state((), self.config.settings, StoreStatus.UNINITIALIZED)

    @property
    def state(self) -> TradingState:
        return self._state

    @property
    def status(self) -> StoreStatus:
        return self._state.status

    @property
    def timezone(self) -> str:
        return self.config.data.timezone

    # ---------- subscriptions ----------
    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call `callback` with every new snapshot.  Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, state: TradingState) -> None:
        """Install a new snapshot and notify subscribers."""
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Subscriber %r failed", callback)

    # ---------- loading ----------
    def initialize(self) -> TradingState:
        """Load the journal from storage.

        Missing or malformed data is logged and replaced by an empty log
        or default settings.  The store is always ready afterwards.
        """
        if self.status is not StoreStatus.UNINITIALIZED:
            return self._state
        self._commit(replace(self._state, status=StoreStatus.LOADING))
        trades: Tuple[Trade, ...] = ()
        settings = self.config.settings
        try:
            settings = self._load_settings(settings)
            trades = self._load_trades()
        finally:
            self._commit(derive_state(trades, settings, StoreStatus.READY))
        logger.info("Loaded %d trade(s) from storage", len(trades))
        return self._state

    def _load_settings(self, defaults: Settings) -> Settings:
        key = self.config.storage.settings_key
        try:
            raw = self.storage.get(key)
            if raw is None:
                return defaults
            return settings_from_dict(json.loads(raw), defaults)
        except Exception as exc:
            logger.warning("Ignoring unreadable settings under %r: %s", key, exc)
            return defaults

    def _load_trades(self) -> Tuple[Trade, ...]:
        key = self.config.storage.trades_key
        try:
            raw = self.storage.get(key)
            if raw is None:
                return ()
            records = json.loads(raw)
            if not isinstance(records, list):
                raise ValueError("expected a JSON array of trades")
            return tuple(trade_from_dict(r, self.timezone) for r in records)
        except Exception as exc:
            logger.warning("Ignoring unreadable trade log under %r: %s", key, exc)
            return ()

    # ---------- persistence ----------
    def _persist_trades(self) -> None:
        # An empty log is never written, so deleting every trade leaves the
        # previously stored log in place.
        trades = self._state.trades
        if not trades:
            logger.debug("Trade log empty, skipping save")
            return
        try:
            payload = json.dumps([trade_to_dict(t) for t in trades])
            self.storage.set(self.config.storage.trades_key, payload)
        except Exception as exc:
            logger.error("Error saving trades: %s", exc)

    def _persist_settings(self) -> None:
        try:
            payload = json.dumps(settings_to_dict(self._state.settings))
            self.storage.set(self.config.storage.settings_key, payload)
        except Exception as exc:
            logger.error("Error saving settings: %s", exc)

    # ---------- mutations ----------
    def _replace_trades(self, trades: Tuple[Trade, ...]) -> None:
        self._commit(derive_state(trades, self._state.settings, self._state.status))
        self._persist_trades()

    def add_trade(self, draft: TradeDraft) -> Trade:
        """Record a new trade and return it with its id and derived fields."""
        trade = create_trade(draft, self.timezone)
        logger.debug("Adding trade %s (%s %s)", trade.id, trade.type.value, trade.instrument)
        self._replace_trades(self._state.trades + (trade,))
        return trade

    def update_trade(self, trade: Trade) -> bool:
        """Replace the trade with the same id.

        Derived fields are recomputed from the new values.  Returns
        `False` (and changes nothing) when the id is unknown.
        """
        trades = self._state.trades
        for position, existing in enumerate(trades):
            if existing.id == trade.id:
                break
        else:
            logger.debug("Update ignored, no trade with id %s", trade.id)
            return False
        updated = replace(with_derived_fields(trade, self.timezone), created_at=existing.created_at)
        logger.debug("Updating trade %s", trade.id)
        self._replace_trades(trades[:position] + (updated,) + trades[position + 1:])
        return True

    def delete_trade(self, trade_id: str) -> bool:
        """Remove the trade with the given id.  Returns whether one was removed."""
        trades = tuple(t for t in self._state.trades if t.id != trade_id)
        if len(trades) == len(self._state.trades):
            logger.debug("Delete ignored, no trade with id %s", trade_id)
            return False
        logger.debug("Deleting trade %s", trade_id)
        self._replace_trades(trades)
        return True

    def update_settings(self, **changes: float) -> Settings:
        """Merge `changes` into the account settings.

        Only the statistics and the equity curve depend on settings; the
        monthly and per-instrument breakdowns are carried over.
        """
        current = self._state
        settings = current.settings.merged(**changes)
        self._commit(
            replace(
                current,
                settings=settings,
                statistics=compute_statistics(current.trades, settings),
                equity_data=tuple(build_equity_curve(current.trades, settings)),
            )
        )
        self._persist_settings()
        return settings

    # ---------- queries ----------
    def get_trade(self, trade_id: str) -> Optional[Trade]:
        for trade in self._state.trades:
            if trade.id == trade_id:
                return trade
        return None

    def get_trades_by_date(self, date: str) -> List[Trade]:
        return trades_on(self._state.trades, date)

    def get_day_data(self, date: str) -> Optional[DayData]:
        return day_data(self._state.trades, date)
