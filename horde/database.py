# horde/database.py
"""
Handles asynchronous database interactions using asyncpg for PostgreSQL.
The horde only persists a handful of integers, kept in a key/value table.
"""
import logging
from typing import Any, Dict, List, Optional

import asyncpg
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger(__name__)

STATE_DAYS_SINCE_SPAWN = "days_since_spawn"
STATE_MINUTE_OF_DAY = "minute_of_day"
STATE_GAME_DAY = "game_day"


class DatabaseSettings(BaseSettings):
    """Connection settings, read from HORDE_DB_* environment variables or .env."""
    model_config = SettingsConfigDict(env_prefix="HORDE_DB_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "horde"
    password: str = ""
    database: str = "horde"
    min_size: int = 1
    max_size: int = 5


class DatabaseManager:
    """A class to manage the application's PostgreSQL connection pool and queries."""

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self.settings = settings or DatabaseSettings()
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Creates the connection pool."""
        try:
            self.pool = await asyncpg.create_pool(
                host=self.settings.host,
                port=self.settings.port,
                user=self.settings.user,
                password=self.settings.password,
                database=self.settings.database,
                min_size=self.settings.min_size,
                max_size=self.settings.max_size,
            )
            log.info("Connected to PostgreSQL at %s:%d/%s.",
                     self.settings.host, self.settings.port, self.settings.database)
        except Exception:
            log.exception("!!! Failed to connect to PostgreSQL database.")
            raise

    async def close(self):
        """Closes the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            log.info("PostgreSQL connection pool closed.")

    async def execute_query(self, query: str, *params) -> str:
        """Executes a data-modifying query. Returns the status string."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *params)

    async def fetch_one_query(self, query: str, *params) -> Optional[asyncpg.Record]:
        """Executes a query that is expected to return at most one row."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *params)

    async def fetch_all_query(self, query: str, *params) -> List[asyncpg.Record]:
        """Executes a query that returns multiple rows."""
        if not self.pool: raise ConnectionError("Database pool not initialized.")
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *params)

    async def init_db(self):
        """Creates the state table if it does not exist yet."""
        log.info("--- Initializing horde database schema ---")
        await self.execute_query("""
            CREATE TABLE IF NOT EXISTS horde_state (
                key TEXT PRIMARY KEY,
                value INTEGER NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)

    # --- Key/value state ---
    async def get_state_value(self, key: str) -> Optional[int]:
        row = await self.fetch_one_query("SELECT value FROM horde_state WHERE key = $1", key)
        return row['value'] if row else None

    async def set_state_value(self, key: str, value: int) -> str:
        return await self.execute_query(
            """
            INSERT INTO horde_state (key, value) VALUES ($1, $2)
            ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
            """,
            key, value
        )

    async def get_days_since_spawn(self) -> Optional[int]:
        return await self.get_state_value(STATE_DAYS_SINCE_SPAWN)

    async def save_days_since_spawn(self, days: int) -> str:
        return await self.set_state_value(STATE_DAYS_SINCE_SPAWN, days)

    async def get_game_time(self) -> Optional[Dict[str, Any]]:
        """Returns the saved clock position, or None if the clock was never saved."""
        rows = await self.fetch_all_query(
            "SELECT key, value FROM horde_state WHERE key = ANY($1::text[])",
            [STATE_MINUTE_OF_DAY, STATE_GAME_DAY]
        )
        values = {row['key']: row['value'] for row in rows}
        if STATE_MINUTE_OF_DAY not in values:
            return None
        return values

    async def save_game_time(self, minute_of_day: int, day: int):
        await self.set_state_value(STATE_MINUTE_OF_DAY, minute_of_day)
        await self.set_state_value(STATE_GAME_DAY, day)
