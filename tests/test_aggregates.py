import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from trade_journal.journal.models import TradeDraft, TradeType, create_trade
from trade_journal.reporting.aggregates import (
    day_data,
    instrument_performance,
    monthly_performance,
    trades_on,
)

import unittest


def _trade(pnl: float, date: str, instrument: str = "EURUSD", quantity: float = 1.0, time: str = "12:00"):
    draft = TradeDraft(instrument, TradeType.BUY, 10.0, 10.0 + pnl / quantity, quantity, date, time)
    return create_trade(draft, "UTC")


class TestMonthlyPerformance(unittest.TestCase):
    def test_two_months(self) -> None:
        trades = [
            _trade(25, "2024-02-10"),
            _trade(-5, "2024-01-15"),
            _trade(15, "2024-01-20"),
            _trade(-8, "2024-02-11"),
        ]
        months = monthly_performance(trades)
        self.assertEqual(len(months), 2)
        jan, feb = months
        self.assertEqual((jan.year, jan.month, jan.label), (2024, 1, "Jan 2024"))
        self.assertEqual(jan.trade_count, 2)
        self.assertAlmostEqual(jan.profit, 15)
        self.assertAlmostEqual(jan.loss, -5)
        self.assertAlmostEqual(jan.net, 10)
        self.assertEqual(feb.label, "Feb 2024")
        self.assertEqual(feb.trade_count, 2)
        self.assertAlmostEqual(feb.profit, 25)
        self.assertAlmostEqual(feb.loss, -8)
        self.assertAlmostEqual(feb.net, 17)

    def test_months_sorted_across_years(self) -> None:
        trades = [_trade(1, "2025-01-02"), _trade(1, "2023-12-30"), _trade(1, "2024-06-01")]
        labels = [m.label for m in monthly_performance(trades)]
        self.assertEqual(labels, ["Dec 2023", "Jun 2024", "Jan 2025"])

    def test_month_follows_entry_timezone(self) -> None:
        draft = TradeDraft("EURUSD", TradeType.BUY, 10.0, 11.0, 1, "2024-03-01", "00:30")
        trade = create_trade(draft, "Europe/Brussels")
        month = monthly_performance([trade])[0]
        self.assertEqual((month.year, month.month), (2024, 3))


class TestInstrumentPerformance(unittest.TestCase):
    def test_grouping_and_order(self) -> None:
        trades = [
            _trade(-10, "2024-01-01", "GBPUSD", quantity=2),
            _trade(30, "2024-01-02", "EURUSD", quantity=4),
            _trade(-5, "2024-01-03", "EURUSD"),
            _trade(20, "2024-01-04", "XAUUSD"),
        ]
        groups = instrument_performance(trades)
        self.assertEqual([g.instrument for g in groups], ["EURUSD", "XAUUSD", "GBPUSD"])
        eur = groups[0]
        self.assertEqual(eur.trade_count, 2)
        self.assertAlmostEqual(eur.pnl, 25)
        self.assertAlmostEqual(eur.win_rate, 50.0)
        self.assertAlmostEqual(eur.total_volume, 10.0 * 4 + 10.0 * 1)
        self.assertAlmostEqual(groups[2].win_rate, 0.0)

    def test_equal_pnl_keeps_first_seen_order(self) -> None:
        trades = [_trade(5, "2024-01-01", "B"), _trade(5, "2024-01-01", "A")]
        self.assertEqual([g.instrument for g in instrument_performance(trades)], ["B", "A"])

    def test_empty(self) -> None:
        self.assertEqual(instrument_performance([]), [])
        self.assertEqual(monthly_performance([]), [])


class TestDayData(unittest.TestCase):
    def test_sums_pnl_and_percentage(self) -> None:
        trades = [_trade(2, "2024-04-02"), _trade(-1, "2024-04-02"), _trade(7, "2024-04-03")]
        day = day_data(trades, "2024-04-02")
        self.assertEqual(len(day.trades), 2)
        self.assertAlmostEqual(day.total_pnl, 1.0)
        self.assertAlmostEqual(day.total_percentage, 20.0 - 10.0)

    def test_no_trades_on_date(self) -> None:
        trades = [_trade(2, "2024-04-02")]
        self.assertIsNone(day_data(trades, "2024-04-05"))
        self.assertEqual(trades_on(trades, "2024-04-05"), [])

    def test_exact_string_match(self) -> None:
        trades = [_trade(2, "2024-04-02")]
        self.assertEqual(trades_on(trades, "2024-4-2"), [])


if __name__ == '__main__':
    unittest.main()
