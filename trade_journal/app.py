"""
Application entry point.

This module defines a command‑line interface over a journal kept in a
JSON state file.  Trades can be added, listed and deleted, the account
settings changed, statistics printed and report files written.
"""

from __future__ import annotations

import argparse
import logging
import math
from typing import List, Optional

from .config.schema import Config, load_config
from .journal.models import LABELS, MOODS, TradeDraft, TradeType
from .journal.store import TradingStore
from .reporting.report import generate_journal_report
from .risk.calculator import calculate_risk
from .utils.persistence import JsonFileBlobStore
from .utils.timeutils import is_canonical_date, is_canonical_time


def _setup_logging(verbose: bool) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def _fmt(value: float) -> str:
    return "inf" if math.isinf(value) else f"{value:,.2f}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Trading journal")
    parser.add_argument('--config', default=None, help="Path to configuration YAML file")
    parser.add_argument('--store', default=None, help="Journal state file (overrides the configuration)")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    sub = parser.add_subparsers(dest='command', required=True)

    add = sub.add_parser('add', help="Record a trade")
    add.add_argument('instrument')
    add.add_argument('type', choices=[t.value for t in TradeType])
    add.add_argument('entry_price', type=float)
    add.add_argument('exit_price', type=float)
    add.add_argument('quantity', type=float)
    add.add_argument('date', help="YYYY-MM-DD")
    add.add_argument('time', help="HH:MM")
    add.add_argument('--commission', type=float, default=0.0)
    add.add_argument('--swap', type=float, default=0.0)
    add.add_argument('--notes', default="")
    add.add_argument('--mood', default="", choices=("",) + MOODS)
    add.add_argument('--label', default="", choices=("",) + LABELS)

    lst = sub.add_parser('list', help="List trades")
    lst.add_argument('--date', default=None, help="Only trades recorded on this date")

    delete = sub.add_parser('delete', help="Delete a trade by id")
    delete.add_argument('trade_id')

    sub.add_parser('stats', help="Print performance statistics")

    settings = sub.add_parser('settings', help="Show or change account settings")
    settings.add_argument('--initial-capital', type=float, default=None)
    settings.add_argument('--commission', type=float, default=None)
    settings.add_argument('--swap-fee', type=float, default=None)

    report = sub.add_parser('report', help="Write report files")
    report.add_argument('--out-dir', default='results')

    risk = sub.add_parser('risk', help="Position size for a fixed account risk")
    risk.add_argument('account_balance', type=float)
    risk.add_argument('risk_percentage', type=float)
    risk.add_argument('entry_price', type=float)
    risk.add_argument('stop_loss', type=float)
    risk.add_argument('--take-profit', type=float, default=None)
    return parser


def _validate_draft(args: argparse.Namespace) -> None:
    if not args.instrument.strip():
        raise ValueError("Instrument is required")
    if args.entry_price <= 0 or args.exit_price <= 0:
        raise ValueError("Entry and exit prices must be positive")
    if args.quantity <= 0:
        raise ValueError("Quantity must be positive")
    if args.commission < 0 or args.swap < 0:
        raise ValueError("Commission and swap cannot be negative")
    if not is_canonical_date(args.date):
        raise ValueError(f"Invalid date {args.date!r}, expected YYYY-MM-DD")
    if not is_canonical_time(args.time):
        raise ValueError(f"Invalid time {args.time!r}, expected HH:MM or HH:MM:SS")


def _print_stats(store: TradingStore) -> None:
    stats = store.state.statistics
    print(f"Trades:          {stats.total_trades} ({stats.winning_trades} won, {stats.losing_trades} lost)")
    print(f"Win rate:        {stats.win_rate:.1f}%")
    print(f"Total return:    {stats.total_return:.2f}%")
    print(f"Equity:          {_fmt(stats.initial_equity)} -> {_fmt(stats.current_equity)}")
    print(f"Profit factor:   {_fmt(stats.profit_factor)}")
    print(f"Avg win / loss:  {_fmt(stats.avg_win)} / {_fmt(stats.avg_loss)}")
    print(f"Risk/reward:     {_fmt(stats.risk_reward_ratio)}")
    for month in store.state.monthly_performance:
        print(f"  {month.label}: net {_fmt(month.net)} over {month.trade_count} trade(s)")


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command‑line arguments and dispatch to the requested command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    config = load_config(args.config) if args.config else Config()
    if args.store:
        config.storage.path = args.store

    if args.command == 'risk':
        calc = calculate_risk(
            args.account_balance, args.risk_percentage, args.entry_price, args.stop_loss, args.take_profit
        )
        print(f"Risk amount:   {_fmt(calc.risk_amount)}")
        print(f"Position size: {calc.position_size:,.4f}")
        if args.take_profit:
            print(f"Reward amount: {_fmt(calc.reward_amount)}")
            print(f"Risk/reward:   1:{calc.risk_reward_ratio:.2f}")
        return 0

    store = TradingStore(JsonFileBlobStore(config.storage.path), config)
    store.initialize()

    if args.command == 'add':
        try:
            _validate_draft(args)
        except ValueError as exc:
            parser.error(str(exc))
        trade = store.add_trade(
            TradeDraft(
                instrument=args.instrument.strip(),
                type=TradeType(args.type),
                entry_price=args.entry_price,
                exit_price=args.exit_price,
                quantity=args.quantity,
                date=args.date,
                time=args.time,
                commission=args.commission,
                swap=args.swap,
                notes=args.notes,
                mood=args.mood,
                label=args.label,
            )
        )
        print(f"{trade.id}  {trade.instrument} {trade.type.value}  P&L {_fmt(trade.pnl)} ({trade.percentage:.2f}%)")
    elif args.command == 'list':
        trades = store.get_trades_by_date(args.date) if args.date else store.state.trades
        for trade in trades:
            print(
                f"{trade.id}  {trade.date} {trade.time}  {trade.instrument:<10} {trade.type.value:<4} "
                f"P&L {_fmt(trade.pnl):>12} ({trade.percentage:.2f}%)"
            )
        if args.date:
            day = store.get_day_data(args.date)
            if day is not None:
                print(f"Day total: {_fmt(day.total_pnl)} ({day.total_percentage:.2f}%)")
    elif args.command == 'delete':
        if not store.delete_trade(args.trade_id):
            logging.error("No trade with id %s", args.trade_id)
            return 1
    elif args.command == 'stats':
        _print_stats(store)
    elif args.command == 'settings':
        if args.initial_capital is not None and args.initial_capital <= 0:
            parser.error("Initial capital must be positive")
        if (args.commission is not None and args.commission < 0) or (
            args.swap_fee is not None and args.swap_fee < 0
        ):
            parser.error("Commission and swap fee cannot be negative")
        changes = {
            name: value
            for name, value in (
                ('initial_capital', args.initial_capital),
                ('commission', args.commission),
                ('swap_fee', args.swap_fee),
            )
            if value is not None
        }
        settings = store.update_settings(**changes) if changes else store.state.settings
        print(f"Initial capital: {_fmt(settings.initial_capital)}")
        print(f"Commission:      {_fmt(settings.commission)}")
        print(f"Swap fee:        {_fmt(settings.swap_fee)}")
    elif args.command == 'report':
        generate_journal_report(store.state, out_dir=args.out_dir)
        logging.info("Report written to the '%s' directory.", args.out_dir)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
