# tests/test_database.py
import unittest
from unittest.mock import AsyncMock, MagicMock, patch
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.database import DatabaseManager, DatabaseSettings, STATE_DAYS_SINCE_SPAWN

class TestDatabaseManager(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.settings = DatabaseSettings(host="db.test", port=5433, user="u", password="p", database="horde")
        self.db_manager = DatabaseManager(self.settings)
        self.mock_conn = AsyncMock()
        self.mock_pool = MagicMock()
        self.mock_pool.acquire.return_value.__aenter__.return_value = self.mock_conn
        self.mock_pool.close = AsyncMock()

    async def test_queries_need_a_pool(self):
        with self.assertRaises(ConnectionError):
            await self.db_manager.get_days_since_spawn()

    async def test_connect_uses_settings(self):
        with patch('horde.database.asyncpg.create_pool', new=AsyncMock(return_value=self.mock_pool)) as create_pool:
            await self.db_manager.connect()
        self.assertIs(self.db_manager.pool, self.mock_pool)
        kwargs = create_pool.call_args.kwargs
        self.assertEqual(kwargs["host"], "db.test")
        self.assertEqual(kwargs["port"], 5433)

        await self.db_manager.close()
        self.mock_pool.close.assert_awaited_once()
        self.assertIsNone(self.db_manager.pool)

    async def test_days_since_spawn_round_trip_queries(self):
        self.db_manager.pool = self.mock_pool
        self.mock_conn.fetchrow.return_value = {'value': 3}
        self.assertEqual(await self.db_manager.get_days_since_spawn(), 3)
        self.assertEqual(self.mock_conn.fetchrow.call_args[0][1], STATE_DAYS_SINCE_SPAWN)

        await self.db_manager.save_days_since_spawn(7)
        self.assertEqual(self.mock_conn.execute.call_args[0][1:], (STATE_DAYS_SINCE_SPAWN, 7))

    async def test_missing_value_is_none(self):
        self.db_manager.pool = self.mock_pool
        self.mock_conn.fetchrow.return_value = None
        self.assertIsNone(await self.db_manager.get_days_since_spawn())

    async def test_game_time(self):
        self.db_manager.pool = self.mock_pool
        self.mock_conn.fetch.return_value = [
            {'key': 'minute_of_day', 'value': 600},
            {'key': 'game_day', 'value': 3},
        ]
        self.assertEqual(await self.db_manager.get_game_time(), {'minute_of_day': 600, 'game_day': 3})

        self.mock_conn.fetch.return_value = []
        self.assertIsNone(await self.db_manager.get_game_time())

if __name__ == '__main__':
    unittest.main()
