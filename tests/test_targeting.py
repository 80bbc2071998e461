# tests/test_targeting.py
import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from horde.entity import ORIGIN
from horde.settings import BehaviourSettings
from horde.targeting import TargetFilter
from horde.world import Player

class TestTargetFilter(unittest.TestCase):
    def setUp(self):
        self.filter = TargetFilter(BehaviourSettings(ignored=("scientistjunkpile.prefab",)))

    def test_awake_players_are_fair_game(self):
        self.assertFalse(self.filter.should_ignore(Player("Ada", ORIGIN)))

    def test_sleepers_are_ignored_unless_enabled(self):
        sleeper = Player("Bo", ORIGIN, is_sleeping=True)
        self.assertTrue(self.filter.should_ignore(sleeper))
        hungry = TargetFilter(BehaviourSettings(attack_sleepers=True))
        self.assertFalse(hungry.should_ignore(sleeper))

    def test_exempt_players_are_ignored(self):
        self.assertTrue(self.filter.should_ignore(Player("Admin", ORIGIN, horde_exempt=True)))

    def test_ignored_kinds(self):
        junkpile = Player("pile", ORIGIN, is_npc=True, kind="scientistjunkpile.prefab")
        self.assertTrue(self.filter.should_ignore(junkpile))

    def test_human_npcs(self):
        villager = Player("Villager", ORIGIN, is_npc=True, kind="bandit_guard.prefab")
        scientist = Player("Scientist", ORIGIN, is_npc=True, kind="scientistnpc.prefab")
        self.assertTrue(TargetFilter.is_human_npc(villager))
        self.assertFalse(TargetFilter.is_human_npc(scientist))
        self.assertTrue(self.filter.should_ignore(villager))
        self.assertFalse(self.filter.should_ignore(scientist))

        brawler = TargetFilter(BehaviourSettings(ignore_human_npc=False))
        self.assertFalse(brawler.should_ignore(villager))

    def test_sentries(self):
        self.assertTrue(self.filter.sentries_may_target())
        self.assertFalse(TargetFilter(BehaviourSettings(sentries_attack=False)).sentries_may_target())

if __name__ == '__main__':
    unittest.main()
