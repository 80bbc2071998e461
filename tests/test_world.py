# tests/test_world.py
import unittest
from unittest.mock import Mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.definitions import timing
from horde.entity import Position
from horde.world import CORPSE_DESPAWN_SECONDS, Player, World

class TestWorld(unittest.TestCase):
    def setUp(self):
        self.world = World(relief=0.0)
        self.spot = Position(0.0, 25.5, 0.0)

    def test_create_entity_carries_default_inventory(self):
        entity = self.world.create_entity(timing.HORDE_ENTITY_KIND, self.spot)
        self.assertIn(timing.GRENADE_ITEM, entity.inventory)
        self.assertIs(self.world.entities[entity.instance_id], entity)

    def test_create_entity_refuses_when_full_or_off_the_map(self):
        small = World(relief=0.0, max_entities=1)
        self.assertIsNotNone(small.create_entity("a", self.spot))
        self.assertIsNone(small.create_entity("b", self.spot))
        self.assertIsNone(self.world.create_entity("c", Position(5000.0, 0.0, 0.0)))

    def test_destroy_is_idempotent(self):
        entity = self.world.create_entity("a", self.spot)
        self.world.destroy_entity(entity, leave_corpse=True)
        self.world.destroy_entity(entity, leave_corpse=True)
        self.assertTrue(entity.is_destroyed)
        self.assertEqual(len(self.world.corpses), 1)
        self.assertEqual(self.world.live_entities(), [])

    def test_fatal_damage_notifies_listeners(self):
        listener = Mock()
        killer = Player("Ada", self.spot)
        self.world.subscribe_death(listener)
        entity = self.world.create_entity("a", self.spot)

        self.assertFalse(self.world.damage_entity(entity, 10.0, killer))
        listener.assert_not_called()
        self.assertTrue(self.world.damage_entity(entity, 500.0, killer))
        listener.assert_called_once_with(entity, killer)
        self.assertIsNotNone(self.world.get_corpse(entity.instance_id))

        self.world.unsubscribe_death(listener)
        self.assertFalse(self.world.damage_entity(entity, 500.0, killer))

    def test_water_depth(self):
        self.assertEqual(self.world.get_water_depth(Position(0.0, -3.0, 0.0)), 3.0)
        self.assertEqual(self.world.get_water_depth(self.spot), 0.0)

    def test_coast_falls_into_the_sea(self):
        self.assertGreater(self.world.get_height(0.0, 0.0), 0.0)
        self.assertLess(self.world.get_height(1990.0, 0.0), 0.0)

class TestCorpseExpiry(unittest.IsolatedAsyncioTestCase):
    async def test_corpses_expire_when_their_timer_runs_out(self):
        world = World(relief=0.0)
        short = world.create_entity("a", Position(0.0, 25.5, 0.0))
        long = world.create_entity("b", Position(5.0, 25.5, 0.0))
        world.destroy_entity(short, leave_corpse=True)
        world.destroy_entity(long, leave_corpse=True)
        world.get_corpse(short.instance_id).despawn_seconds = 10.0

        await world.update(9.0)
        self.assertEqual(len(world.corpses), 2)
        await world.update(1.0)
        self.assertIsNone(world.get_corpse(short.instance_id))
        self.assertIsNotNone(world.get_corpse(long.instance_id))
        self.assertEqual(world.get_corpse(long.instance_id).despawn_seconds, CORPSE_DESPAWN_SECONDS - 10.0)

if __name__ == '__main__':
    unittest.main()
