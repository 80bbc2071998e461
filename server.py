# server.py
"""
Main entry point for the horde server.
Builds the host world and the horde engine, serves the admin API and
handles graceful shutdown.
"""
import asyncio
import logging
import config
from typing import Optional

import uvicorn

from admin_portal.backend.config import settings as admin_settings
from admin_portal.backend.main import create_app
from horde.clock import GameClock
from horde.database import DatabaseManager
from horde.lifecycle import HordeLifecycle
from horde.settings import load_config
from horde.ticker import Ticker
from horde.world import World

# --- Logging Setup ---
log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
log_handlers = [
    logging.FileHandler(config.LOG_FILE),
    logging.StreamHandler()
]
logging.basicConfig(
    level=logging.INFO,
    format=log_format,
    handlers=log_handlers
)
log = logging.getLogger(__name__)

# --- Global Server State ---
lifecycle: Optional[HordeLifecycle] = None


def build_world() -> World:
    """The demo map: a square island with a few named sites and some clutter."""
    world = World()
    for name, (x, z) in config.SAMPLE_SITES.items():
        world.add_site(name, x, z)
    world.add_obstacle(-1180.0, 910.0, 12.0, layer="Construction")
    world.add_obstacle(1490.0, -380.0, 6.0, layer="Deployed")
    world.add_obstacle(0.0, 0.0, 25.0, layer="World")
    return world


async def restore_clock(db_manager: DatabaseManager) -> GameClock:
    try:
        saved = await db_manager.get_game_time()
    except Exception:
        log.warning("Failed to load saved game time, starting a fresh clock.", exc_info=True)
        saved = None
    if not saved:
        return GameClock()
    log.info("Restored game clock: day %s, minute %s.", saved.get("game_day"), saved.get("minute_of_day"))
    return GameClock(minute_of_day=saved["minute_of_day"], day=saved.get("game_day", 1))


async def _autosave_loop(lifecycle: HordeLifecycle, interval_seconds: int):
    """Periodically saves the clock and the day counter."""
    log.info("Autosave task started. Interval: %d seconds.", interval_seconds)
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            log.info("Autosave: saving horde state...")
            await lifecycle.save_state()
        except asyncio.CancelledError:
            log.info("Autosave task cancelled.")
            break
        except Exception:
            log.exception("Autosave: Unexpected error in autosave loop.")
            await asyncio.sleep(60)


async def main():
    """Main server entry point."""
    global lifecycle

    log.info("Starting horde server...")

    # 1. Connect to the database and restore the clock
    db_manager = DatabaseManager()
    await db_manager.connect()
    await db_manager.init_db()
    clock = await restore_clock(db_manager)

    # 2. Build the world and the horde engine
    horde_config = load_config(config.HORDE_CONFIG_FILE)
    world = build_world()
    lifecycle = HordeLifecycle(horde_config, world, clock, db_manager)
    await lifecycle.start()

    # 3. Start background tasks
    ticker = Ticker(config.TICKER_INTERVAL_SECONDS)
    ticker.subscribe(clock.update)
    ticker.subscribe(world.update)
    ticker.start()
    autosave_task = None
    if config.AUTOSAVE_INTERVAL_SECONDS > 0:
        autosave_task = asyncio.create_task(_autosave_loop(lifecycle, config.AUTOSAVE_INTERVAL_SECONDS))

    # 4. Serve the admin API on the same loop
    app = create_app(lifecycle)
    server = uvicorn.Server(uvicorn.Config(app, host=admin_settings.host, port=admin_settings.port,
                                           log_level="info"))
    log.info("Admin API listening on %s:%d", admin_settings.host, admin_settings.port)

    # This block ensures graceful shutdown
    try:
        await server.serve()
    except asyncio.CancelledError:
        log.info("Main server task cancelled.")
    finally:
        log.info("Shutting down server...")
        if autosave_task: autosave_task.cancel()
        await ticker.stop()

        # Saves state and removes every horde entity before the pool goes away.
        await lifecycle.shutdown()

        await db_manager.close()
        log.info("Server shutdown complete.")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Server stopped manually.")
