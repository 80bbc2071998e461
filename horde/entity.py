# horde/entity.py
"""
Host-side entity handles and world positions.
The horde controllers only keep references to these; the World owns them.
"""
import math
import random
import logging
from typing import List, NamedTuple, Optional, Sequence

from .definitions.timing import GRENADE_ITEM

log = logging.getLogger(__name__)


class Position(NamedTuple):
    x: float
    y: float
    z: float

    def distance_to(self, other: "Position") -> float:
        return math.dist(self, other)

    def horizontal_distance_to(self, other: "Position") -> float:
        return math.hypot(self.x - other.x, self.z - other.z)


ORIGIN = Position(0.0, 0.0, 0.0)


class Entity:
    """
    A spawned NPC in the world. Identity is the object itself; two handles are
    never equal unless they are the same instance.
    """
    next_instance_id = 1

    def __init__(self, kind: str, position: Position):
        self.instance_id: int = Entity.next_instance_id
        Entity.next_instance_id += 1

        self.kind: str = kind
        self.position: Position = position
        self.display_name: str = kind
        self.max_health: float = 100.0
        self.health: float = self.max_health
        self.loadout: Optional[str] = None
        self.inventory: List[str] = []
        self.is_destroyed: bool = False

    def is_alive(self) -> bool:
        """Returns True if the entity has health left and still exists in the world."""
        return self.health > 0 and not self.is_destroyed

    def set_max_health(self, value: float):
        self.max_health = max(1.0, value)

    def set_health(self, value: float):
        self.health = max(0.0, min(value, self.max_health))

    def die(self):
        """Marks the entity dead. The body stays in the world until destroyed."""
        log.debug("ENTITY DEATH: %s (Instance: %d) has died.", self.display_name, self.instance_id)
        self.health = 0.0

    def __repr__(self) -> str:
        state = "destroyed" if self.is_destroyed else f"HP:{self.health:.0f}/{self.max_health:.0f}"
        return f"<Entity Inst:{self.instance_id} '{self.display_name}' {state}>"

    def __str__(self) -> str:
        return self.display_name


def outfit_entity(entity: Entity, display_name: str, health: float, kits: Sequence[str],
                  throw_grenades: bool, rng: random.Random):
    """Names the entity, sets its health and hands it a random kit from the list."""
    entity.display_name = display_name
    entity.set_max_health(health)
    entity.set_health(health)
    if kits:
        entity.loadout = rng.choice(list(kits))
    if not throw_grenades:
        entity.inventory = [item for item in entity.inventory if item != GRENADE_ITEM]
