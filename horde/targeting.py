# horde/targeting.py
"""
Target filtering for the host's combat hooks. The host asks before a horde
entity picks a target, and before a sentry shoots at a horde entity.
"""
from typing import Any

from .definitions import timing
from .settings import BehaviourSettings

HORDE_KINDS = frozenset({timing.HORDE_ENTITY_KIND})
SCIENTIST_KINDS = frozenset({"scientistnpc.prefab", "scientistjunkpile.prefab"})


class TargetFilter:
    def __init__(self, behaviour: BehaviourSettings):
        self.behaviour = behaviour

    def should_ignore(self, target: Any) -> bool:
        """True when horde entities must leave the target alone."""
        if getattr(target, "horde_exempt", False):
            return True
        if getattr(target, "kind", None) in self.behaviour.ignored:
            return True
        if self.behaviour.ignore_human_npc and self.is_human_npc(target):
            return True
        if not self.behaviour.attack_sleepers and getattr(target, "is_sleeping", False):
            return True
        return False

    @staticmethod
    def is_human_npc(target: Any) -> bool:
        """Human-shaped NPCs other than scientists and the horde itself."""
        if not getattr(target, "is_npc", False):
            return False
        kind = getattr(target, "kind", "")
        return kind not in HORDE_KINDS and kind not in SCIENTIST_KINDS

    def sentries_may_target(self) -> bool:
        return self.behaviour.sentries_attack
