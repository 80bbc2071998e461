# tests/test_ticker.py
import unittest
from unittest.mock import AsyncMock
import asyncio
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.ticker import Ticker

class TestTicker(unittest.IsolatedAsyncioTestCase):
    async def test_tick_awaits_callbacks_in_order(self):
        ticker = Ticker()
        calls = []

        async def first(dt):
            calls.append(("first", dt))

        async def second(dt):
            calls.append(("second", dt))

        ticker.subscribe(first)
        ticker.subscribe(second)
        await ticker.tick(0.5)
        self.assertEqual(calls, [("first", 0.5), ("second", 0.5)])

    async def test_sync_callbacks_are_rejected(self):
        ticker = Ticker()
        with self.assertLogs('horde.ticker', level='ERROR'):
            ticker.subscribe(lambda dt: None)
        self.assertEqual(ticker._callbacks, [])

    async def test_failing_callback_is_isolated(self):
        ticker = Ticker()

        async def broken(dt):
            raise RuntimeError("boom")

        healthy = AsyncMock()

        async def forward(dt):
            await healthy(dt)

        ticker.subscribe(broken)
        ticker.subscribe(forward)
        with self.assertLogs('horde.ticker', level='ERROR'):
            await ticker.tick(1.0)
        healthy.assert_awaited_once_with(1.0)

    async def test_start_runs_until_stopped(self):
        ticker = Ticker(interval_seconds=0.01)
        ticks = []

        async def count(dt):
            ticks.append(dt)

        ticker.subscribe(count)
        self.assertTrue(ticker.start())
        self.assertFalse(ticker.start())
        await asyncio.sleep(0.05)
        await ticker.stop()

        self.assertFalse(ticker.running)
        self.assertGreaterEqual(len(ticks), 1)
        seen = len(ticks)
        await asyncio.sleep(0.03)
        self.assertEqual(len(ticks), seen)

    async def test_non_positive_interval_does_not_start(self):
        ticker = Ticker(interval_seconds=0)
        self.assertFalse(ticker.start())
        self.assertFalse(ticker.running)

if __name__ == '__main__':
    unittest.main()
