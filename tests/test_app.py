import os
import sys
import io
import tempfile
from contextlib import redirect_stderr, redirect_stdout

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from trade_journal.app import main
from trade_journal.journal.store import TradingStore
from trade_journal.utils.persistence import JsonFileBlobStore

import unittest


class TestCommandLine(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.journal = os.path.join(self.tmp.name, 'journal.json')

    def _run(self, *args: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--store', self.journal, *args])
        self.assertEqual(code, 0)
        return out.getvalue()

    def test_add_list_and_stats(self) -> None:
        self._run('add', 'EURUSD', 'buy', '1.2', '1.21', '10000', '2024-03-15', '14:30',
                  '--commission', '5', '--swap', '1', '--mood', 'Confident')
        listing = self._run('list', '--date', '2024-03-15')
        self.assertIn('EURUSD', listing)
        self.assertIn('Day total: 94.00', listing)
        stats = self._run('stats')
        self.assertIn('Trades:          1 (1 won, 0 lost)', stats)

    def test_settings_are_persisted(self) -> None:
        self._run('settings', '--initial-capital', '2500', '--swap-fee', '0.5')
        state = TradingStore(JsonFileBlobStore(self.journal)).initialize()
        self.assertEqual(state.settings.initial_capital, 2500)
        self.assertEqual(state.settings.swap_fee, 0.5)

    def test_delete(self) -> None:
        # Two trades: an emptied log would not be written back.
        self._run('add', 'GBPUSD', 'sell', '1.3', '1.29', '1000', '2024-03-15', '09:00')
        self._run('add', 'EURUSD', 'buy', '1.1', '1.11', '1000', '2024-03-16', '09:00')
        trade = TradingStore(JsonFileBlobStore(self.journal)).initialize().trades[0]
        self._run('delete', trade.id)
        remaining = TradingStore(JsonFileBlobStore(self.journal)).initialize().trades
        self.assertEqual([t.instrument for t in remaining], ['EURUSD'])
        with self.assertLogs(level='ERROR'):
            self.assertEqual(main(['--store', self.journal, 'delete', trade.id]), 1)

    def test_invalid_quantity_rejected(self) -> None:
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                main(['--store', self.journal, 'add', 'EURUSD', 'buy', '1.2', '1.21', '0', '2024-03-15', '14:30'])

    def _assert_rejected(self, *args: str) -> None:
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(['--store', self.journal, *args])
        self.assertEqual(ctx.exception.code, 2)

    def test_impossible_date_rejected(self) -> None:
        self._assert_rejected('add', 'EURUSD', 'buy', '1.2', '1.21', '1', '2024-13-45', '10:00')
        self.assertFalse(os.path.exists(self.journal))

    def test_unpadded_date_rejected(self) -> None:
        # Trades are looked up by exact date string, so only YYYY-MM-DD is stored.
        self._assert_rejected('add', 'EURUSD', 'buy', '1.2', '1.21', '1', '2024-3-5', '10:00')
        self.assertFalse(os.path.exists(self.journal))

    def test_invalid_time_rejected(self) -> None:
        self._assert_rejected('add', 'EURUSD', 'buy', '1.2', '1.21', '1', '2024-03-05', '25:00')
        self._assert_rejected('add', 'EURUSD', 'buy', '1.2', '1.21', '1', '2024-03-05', '9:30')

    def test_time_with_seconds_accepted(self) -> None:
        self._run('add', 'EURUSD', 'buy', '1.2', '1.21', '1', '2024-03-05', '09:30:15')
        listing = self._run('list', '--date', '2024-03-05')
        self.assertIn('09:30:15', listing)

    def test_negative_account_fees_rejected(self) -> None:
        self._assert_rejected('settings', '--commission', '-5')
        self._assert_rejected('settings', '--swap-fee', '-0.5')
        state = TradingStore(JsonFileBlobStore(self.journal)).initialize()
        self.assertEqual(state.settings.commission, 0.0)
        self.assertEqual(state.settings.swap_fee, 0.0)

    def test_risk(self) -> None:
        output = self._run('risk', '10000', '2', '1.2', '1.195')
        self.assertIn('Risk amount:   200.00', output)
        self.assertIn('Position size: 40,000.0000', output)


if __name__ == '__main__':
    unittest.main()
