# tests/test_scheduler.py
import unittest
import random
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.clock import GameClock
from horde.definitions import timing
from horde.entity import Position
from horde.scheduler import SpawnScheduler
from horde.settings import EntitySettings, HordeConfig, WaveDefinition
from horde.world import World

def two_wave_config():
    return HordeConfig(spawn_waves=(
        WaveDefinition(name="Night", zombies=EntitySettings(population=3)),
        WaveDefinition(name="Dawn", spawn_time=4.0, destroy_time=6.0, zombies=EntitySettings(population=2)),
    ))

class TestSpawnScheduler(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.world = World(relief=0.0)
        self.clock = GameClock()
        self.scheduler = SpawnScheduler(two_wave_config(), self.world, self.clock,
                                        rng=random.Random(5), step_delay=0.0)

    async def asyncTearDown(self):
        self.scheduler.shutdown()

    def test_builds_one_controller_per_wave(self):
        self.assertEqual([w.name for w in self.scheduler.waves], ["Night", "Dawn"])
        self.assertIsNotNone(self.scheduler.get_wave("Dawn"))
        self.assertIsNone(self.scheduler.get_wave("Noon"))

    def test_default_wave_when_none_configured(self):
        with self.assertLogs('horde.scheduler', level='WARNING'):
            scheduler = SpawnScheduler(HordeConfig(), self.world, self.clock)
        self.assertEqual(len(scheduler.waves), 1)
        self.assertEqual(scheduler.waves[0].name, "Default Wave")

    def test_day_advance_counts_days(self):
        self.scheduler.on_day_advance()
        self.scheduler.on_day_advance()
        self.assertEqual(self.scheduler.days_since_last_spawn, 2)
        self.assertEqual(self.scheduler.get_wave("Night").days_since_spawned, 2)

    async def test_time_tick_reaches_every_wave(self):
        # 3.0 is inside both spawn windows.
        self.scheduler.on_time_tick(3.0)
        self.assertTrue(all(wave.spawned for wave in self.scheduler.waves))

    def test_death_goes_to_the_owning_wave_only(self):
        self.clock.set_time(12.0)
        dawn = self.scheduler.get_wave("Dawn")
        dawn.spawned = True
        entity = dawn.spawn_entity()
        self.world.damage_entity(entity, 1000.0)

        self.assertTrue(self.scheduler.on_entity_death(entity))
        self.assertEqual(dawn.entities, [])

        stranger = self.world.create_entity(timing.HORDE_ENTITY_KIND, Position(0.0, 25.5, 0.0))
        self.assertFalse(self.scheduler.on_entity_death(stranger))

    async def test_force_spawn_and_despawn_fan_out(self):
        self.scheduler.force_spawn()
        self.assertEqual(len(self.world.live_entities()), 5)
        self.assertEqual(self.scheduler.despawn_all(), 5)
        self.assertEqual(self.world.live_entities(), [])

    def test_status_lists_every_wave(self):
        status = self.scheduler.status()
        self.assertEqual([s["name"] for s in status], ["Night", "Dawn"])
        self.assertEqual(status[0]["population"], 3)

if __name__ == '__main__':
    unittest.main()
