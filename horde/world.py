# horde/world.py
"""
The in-process host world: terrain, water, obstacles, named sites, players
and entities.

It plays the part of the game engine for the server and the simulations.
The horde controllers only rely on the query and entity methods below, so
any engine exposing the same methods can replace it.
"""
import math
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from .entity import Entity, Position

log = logging.getLogger(__name__)

# Called with the dead entity and whatever killed it (a Player, or None).
DeathListener = Callable[[Entity, Optional["Player"]], None]

INSIDE_TERRAIN_TOLERANCE = 0.1
HILL_WAVELENGTH_X = 170.0
HILL_WAVELENGTH_Z = 230.0
COAST_START = 0.8  # Fraction of the half-size where land starts dropping into the sea
COAST_DEPTH = 60.0
CORPSE_DESPAWN_SECONDS = 300.0

# What each kind of entity carries when the host creates it.
DEFAULT_INVENTORIES: Dict[str, tuple] = {
    "scarecrow.prefab": ("chainsaw", "grenade.f1"),
}


@dataclass
class Obstacle:
    position: Position
    radius: float
    layer: str = "Default"


@dataclass
class Player:
    name: str
    position: Position
    is_flying: bool = False
    is_invisible: bool = False
    is_sleeping: bool = False
    is_npc: bool = False
    kind: str = "player.prefab"
    horde_exempt: bool = False

    def is_valid_anchor(self) -> bool:
        """Flying or vanished players are never used to place spawns."""
        return not self.is_flying and not self.is_invisible


@dataclass
class Corpse:
    entity_id: int
    name: str
    position: Position
    loot: List[str] = field(default_factory=list)
    despawn_seconds: float = CORPSE_DESPAWN_SECONDS


@dataclass
class World:
    """Holds the simulated host state. Coordinates are centred on the origin."""
    size_x: float = 4000.0
    size_z: float = 4000.0
    sea_level: float = 0.0
    base_height: float = 25.0
    relief: float = 15.0
    max_entities: int = 1000
    obstacles: List[Obstacle] = field(default_factory=list)
    sites: Dict[str, Position] = field(default_factory=dict)
    players: Dict[str, Player] = field(default_factory=dict)
    entities: Dict[int, Entity] = field(default_factory=dict)
    corpses: List[Corpse] = field(default_factory=list)
    _death_listeners: List[DeathListener] = field(default_factory=list, init=False, repr=False)

    # --- Terrain & Water ---
    def get_height(self, x: float, z: float) -> float:
        """Terrain height: rolling hills that fall away into the sea near the map edge."""
        edge = max(abs(x) / (self.size_x / 2), abs(z) / (self.size_z / 2))
        coast_drop = max(0.0, edge - COAST_START) / (1.0 - COAST_START) * COAST_DEPTH
        hills = self.relief * math.sin(x / HILL_WAVELENGTH_X) * math.cos(z / HILL_WAVELENGTH_Z)
        return self.base_height + hills - coast_drop

    def is_inside_terrain(self, position: Position) -> bool:
        return position.y < self.get_height(position.x, position.z) - INSIDE_TERRAIN_TOLERANCE

    def overlaps_obstacle(self, position: Position, radius: float, layers: Iterable[str]) -> bool:
        """True if any obstacle on one of the given layers intersects the sphere."""
        layers = set(layers)
        for obstacle in self.obstacles:
            if obstacle.layer in layers and obstacle.position.distance_to(position) < obstacle.radius + radius:
                return True
        return False

    def get_water_depth(self, position: Position) -> float:
        """Depth of water above the given point, 0 when dry."""
        return max(0.0, self.sea_level - position.y)

    def add_obstacle(self, x: float, z: float, radius: float, layer: str = "Default") -> Obstacle:
        obstacle = Obstacle(Position(x, self.get_height(x, z), z), radius, layer)
        self.obstacles.append(obstacle)
        return obstacle

    # --- Sites ---
    def add_site(self, name: str, x: float, z: float) -> Position:
        position = Position(x, self.get_height(x, z), z)
        self.sites[name] = position
        return position

    def get_site_position(self, name: str) -> Optional[Position]:
        return self.sites.get(name)

    # --- Players ---
    def add_player(self, player: Player):
        self.players[player.name] = player

    def active_players(self) -> List[Player]:
        return list(self.players.values())

    # --- Entities ---
    def contains(self, x: float, z: float) -> bool:
        return abs(x) <= self.size_x / 2 and abs(z) <= self.size_z / 2

    def live_entities(self) -> List[Entity]:
        return [e for e in self.entities.values() if e.is_alive()]

    def create_entity(self, kind: str, position: Position) -> Optional[Entity]:
        """Spawns an entity, or returns None when the world is full or the position is off the map."""
        if len(self.entities) >= self.max_entities:
            log.warning("World entity limit (%d) reached, cannot create %s.", self.max_entities, kind)
            return None
        if not self.contains(position.x, position.z):
            log.debug("Refusing to create %s outside the map at %s.", kind, position)
            return None
        entity = Entity(kind, position)
        entity.inventory = list(DEFAULT_INVENTORIES.get(kind, ()))
        self.entities[entity.instance_id] = entity
        return entity

    def destroy_entity(self, entity: Entity, leave_corpse: bool = False):
        """Removes an entity from the world. Destroying twice is a no-op."""
        if entity.is_destroyed:
            return
        if leave_corpse:
            self.corpses.append(Corpse(entity.instance_id, entity.display_name, entity.position,
                                       loot=list(entity.inventory)))
        entity.is_destroyed = True
        self.entities.pop(entity.instance_id, None)

    def move_entity(self, entity: Entity, position: Position):
        entity.position = position

    def damage_entity(self, entity: Entity, amount: float, attacker: Optional[Player] = None) -> bool:
        """Applies damage and reports a death to listeners. Returns True if the hit was fatal."""
        if not entity.is_alive():
            return False
        entity.set_health(entity.health - amount)
        if entity.health > 0:
            return False
        entity.die()
        self.destroy_entity(entity, leave_corpse=True)
        self._notify_death(entity, attacker)
        return True

    # --- Corpses ---
    def get_corpse(self, entity_id: int) -> Optional[Corpse]:
        for corpse in self.corpses:
            if corpse.entity_id == entity_id:
                return corpse
        return None

    def remove_corpse(self, entity_id: int) -> bool:
        corpse = self.get_corpse(entity_id)
        if corpse is None:
            return False
        self.corpses.remove(corpse)
        return True

    async def update(self, dt: float):
        """Ticker: counts corpse timers down and removes the ones that ran out."""
        expired = []
        for corpse in self.corpses:
            corpse.despawn_seconds -= dt
            if corpse.despawn_seconds <= 0:
                expired.append(corpse.entity_id)
        for entity_id in expired:
            self.remove_corpse(entity_id)
        if expired:
            log.debug("%d corpses despawned.", len(expired))

    # --- Death notifications ---
    def subscribe_death(self, listener: DeathListener):
        if listener not in self._death_listeners:
            self._death_listeners.append(listener)

    def unsubscribe_death(self, listener: DeathListener):
        if listener in self._death_listeners:
            self._death_listeners.remove(listener)

    def _notify_death(self, entity: Entity, attacker: Optional[Player]):
        for listener in list(self._death_listeners):
            try:
                listener(entity, attacker)
            except Exception:
                log.exception("Death listener %r failed for %r.", listener, entity)
