# simulations/night_cycle_sim.py
"""
A standalone script that runs the horde through one full game day,
minute by minute, without a database or network, and prints how the
wave population changes around dusk and dawn.
"""
import sys
import os
import asyncio
import random
from unittest.mock import AsyncMock

# Add project root to the path to allow imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.clock import GameClock
from horde.definitions import calendar as calendar_defs
from horde.lifecycle import HordeLifecycle
from horde.settings import default_config
from horde.world import Player, World

REPORT_EVERY_MINUTES = 60

async def run_simulation():
    """Starts at noon and advances the clock one game minute at a time for 24 hours."""
    print("--- Running Night Cycle Simulation ---")

    # 1. A small world with a couple of players and one site
    world = World(size_x=1000.0, size_z=1000.0)
    world.add_site("airfield", -200.0, 150.0)
    world.add_player(Player("Ada", world.sites["airfield"]))
    world.add_player(Player("Bo", world.sites["airfield"]._replace(x=120.0)))

    mock_db_manager = AsyncMock()
    mock_db_manager.get_days_since_spawn.return_value = 0

    clock = GameClock(minute_of_day=calendar_defs.STARTING_HOUR * calendar_defs.MINUTES_PER_HOUR)
    lifecycle = HordeLifecycle(default_config(), world, clock, mock_db_manager,
                               rng=random.Random(7), step_delay=0.0)
    await lifecycle.start()

    # 2. Step through the day, yielding so spawn and clear batches can run
    for minute in range(calendar_defs.MINUTES_PER_DAY):
        clock.advance_minutes(1)
        await asyncio.sleep(0)
        if minute % REPORT_EVERY_MINUTES == 0:
            wave = lifecycle.scheduler.waves[0]
            phase = "night" if calendar_defs.is_night(clock.time_of_day) else "day"
            print(f"Day {clock.day} {clock.time_of_day:5.2f}h ({phase}): "
                  f"wave={wave.state.name:<10} live={len(wave.entities):>3} "
                  f"sites={lifecycle.sites.count()} world={len(world.live_entities())}")

    # 3. Force a wave at night, kill a few members and watch them come back
    clock.set_time(22.0)
    lifecycle.force_spawn()
    wave = lifecycle.scheduler.waves[0]
    for entity in list(wave.entities)[:5]:
        world.damage_entity(entity, entity.max_health, attacker=Player("Ada", entity.position))
    await asyncio.sleep(0)
    print(f"After killing five: live={len(wave.entities)} corpses={len(world.corpses)}")

    await lifecycle.shutdown()
    print(f"After shutdown: live entities in world={len(world.live_entities())}")
    print("\n--- Simulation Complete ---")

if __name__ == "__main__":
    asyncio.run(run_simulation())
