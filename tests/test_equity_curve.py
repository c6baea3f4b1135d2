import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from trade_journal.journal.models import Settings, TradeDraft, TradeType, create_trade
from trade_journal.reporting.equity import build_equity_curve

import unittest


def _trade(pnl: float, date: str, time: str = "10:00", instrument: str = "EURUSD"):
    draft = TradeDraft(instrument, TradeType.SELL, 50.0, 50.0 - pnl, 1, date, time)
    return create_trade(draft, "UTC")


class TestEquityCurve(unittest.TestCase):
    def test_empty_journal_has_only_start_point(self) -> None:
        curve = build_equity_curve([], Settings(initial_capital=750))
        self.assertEqual(len(curve), 1)
        self.assertEqual((curve[0].date, curve[0].equity, curve[0].trade_index), ("Start", 750, 0))

    def test_points_follow_timestamps_not_insertion(self) -> None:
        late = _trade(10, "2024-02-03")
        early = _trade(-4, "2024-01-05")
        curve = build_equity_curve([late, early], Settings(initial_capital=100))
        self.assertEqual(len(curve), 3)
        self.assertEqual([p.date for p in curve], ["Start", "Jan 5", "Feb 3"])
        self.assertAlmostEqual(curve[1].equity, 96.0)
        self.assertAlmostEqual(curve[2].equity, 106.0)
        self.assertEqual([p.trade_index for p in curve], [0, 1, 2])

    def test_ties_keep_insertion_order(self) -> None:
        first = _trade(1, "2024-03-01", "09:00", instrument="A")
        second = _trade(2, "2024-03-01", "09:00", instrument="B")
        curve = build_equity_curve([first, second], Settings(initial_capital=0))
        self.assertAlmostEqual(curve[1].equity, 1.0)
        self.assertAlmostEqual(curve[2].equity, 3.0)

    def test_account_fees_applied_per_trade(self) -> None:
        trades = [_trade(10, "2024-01-01"), _trade(10, "2024-01-02")]
        curve = build_equity_curve(trades, Settings(initial_capital=1000, commission=1.5, swap_fee=0.5))
        self.assertAlmostEqual(curve[-1].equity, 1000 + 2 * (10 - 2))

    def test_length_and_index_properties(self) -> None:
        trades = [_trade(i - 3, f"2024-05-{i + 1:02d}") for i in range(7)]
        curve = build_equity_curve(trades, Settings())
        self.assertEqual(len(curve), len(trades) + 1)
        indexes = [p.trade_index for p in curve]
        self.assertEqual(indexes, sorted(indexes))

    def test_curve_is_rebuilt_each_call(self) -> None:
        trades = [_trade(5, "2024-01-01")]
        settings = Settings()
        self.assertEqual(build_equity_curve(trades, settings), build_equity_curve(trades, settings))
        self.assertIsNot(build_equity_curve(trades, settings), build_equity_curve(trades, settings))


if __name__ == '__main__':
    unittest.main()
