"""
Report generation utilities.

This module turns a journal snapshot into files that can be opened
outside the application: CSV files of the trades, equity curve and
breakdowns, a JSON summary of the statistics and a PNG chart of the
equity curve.
"""

from __future__ import annotations

import json
import math
import os
from typing import Any, Dict

import matplotlib
import pandas as pd

# Use non‑interactive backend for environments without display
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ..journal.models import trade_to_dict
from ..journal.store import TradingState
from .metrics import compute_max_drawdown


def _json_number(value: Any) -> Any:
    """Represent infinities as strings; JSON has no literal for them."""
    if isinstance(value, float) and math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


def build_summary(state: TradingState) -> Dict[str, Any]:
    """Statistics of a `TradingState` plus max drawdown, ready for JSON."""
    summary = {k: _json_number(v) for k, v in state.statistics.to_dict().items()}
    summary['max_drawdown'] = compute_max_drawdown(state.equity_data)
    summary['settings'] = {
        'initial_capital': state.settings.initial_capital,
        'commission': state.settings.commission,
        'swap_fee': state.settings.swap_fee,
    }
    return summary


def generate_journal_report(state: TradingState, out_dir: str = "results") -> None:
    """Write report files for a journal snapshot.

    Creates the output directory if it does not exist and writes the
    following files:

    - `trades.csv` – every trade with its derived fields
    - `equity_curve.csv` – account equity after each trade
    - `monthly.csv` – profit and loss per calendar month
    - `instruments.csv` – performance per instrument
    - `summary.json` – performance statistics
    - `equity_curve.png` – line chart of the equity curve
    """
    os.makedirs(out_dir, exist_ok=True)

    trade_columns = [
        'id', 'date', 'time', 'instrument', 'type', 'entry_price', 'exit_price',
        'quantity', 'commission', 'swap', 'pnl', 'percentage', 'mood', 'label', 'notes',
    ]
    df_trades = pd.DataFrame([trade_to_dict(t) for t in state.trades], columns=trade_columns)
    df_trades.to_csv(os.path.join(out_dir, 'trades.csv'), index=False)

    df_eq = pd.DataFrame(
        [{'trade_index': p.trade_index, 'date': p.date, 'equity': p.equity} for p in state.equity_data],
        columns=['trade_index', 'date', 'equity'],
    )
    df_eq.to_csv(os.path.join(out_dir, 'equity_curve.csv'), index=False)

    df_monthly = pd.DataFrame(
        [
            {
                'month': m.label,
                'profit': m.profit,
                'loss': m.loss,
                'net': m.net,
                'trades': m.trade_count,
            }
            for m in state.monthly_performance
        ],
        columns=['month', 'profit', 'loss', 'net', 'trades'],
    )
    df_monthly.to_csv(os.path.join(out_dir, 'monthly.csv'), index=False)

    df_instruments = pd.DataFrame(
        [
            {
                'instrument': i.instrument,
                'trades': i.trade_count,
                'pnl': i.pnl,
                'win_rate': i.win_rate,
                'total_volume': i.total_volume,
            }
            for i in state.instrument_performance
        ],
        columns=['instrument', 'trades', 'pnl', 'win_rate', 'total_volume'],
    )
    df_instruments.to_csv(os.path.join(out_dir, 'instruments.csv'), index=False)

    summary_path = os.path.join(out_dir, 'summary.json')
    with open(summary_path, 'w', encoding='utf-8') as fh:
        json.dump(build_summary(state), fh, indent=2, ensure_ascii=False)

    # Equity curve plot
    fig, ax = plt.subplots(figsize=(10, 4))
    if not df_eq.empty:
        ax.plot(df_eq['trade_index'], df_eq['equity'], linewidth=1.5, marker='o', markersize=3)
        ax.set_xticks(df_eq['trade_index'])
        ax.set_xticklabels(df_eq['date'], rotation=45, ha='right')
        ax.set_title('Equity Curve')
        ax.set_xlabel('Trade')
        ax.set_ylabel('Equity')
    fig.tight_layout()
    fig.savefig(os.path.join(out_dir, 'equity_curve.png'))
    plt.close(fig)
