# horde/sites.py
"""
Persistent sites: named locations that keep a fixed headcount at all hours.
A periodic reconcile prunes losses and spawns exactly the shortfall.
"""
import asyncio
import random
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from . import placement
from .entity import outfit_entity
from .definitions import timing
from .settings import BehaviourSettings, DestroySettings, SiteSettings

if TYPE_CHECKING:
    from .entity import Entity
    from .world import World

log = logging.getLogger(__name__)


class SiteController:
    def __init__(self, settings: SiteSettings, world: "World",
                 behaviour: Optional[BehaviourSettings] = None,
                 destroy: Optional[DestroySettings] = None,
                 rng: Optional[random.Random] = None,
                 reconcile_interval: float = timing.SITE_RECONCILE_INTERVAL_SECONDS):
        self.settings = settings
        self.world = world
        self.behaviour = behaviour or BehaviourSettings()
        self.destroy = destroy or DestroySettings()
        self.rng = rng or random.Random()
        self.reconcile_interval = reconcile_interval
        self.sites: Dict[str, List["Entity"]] = {name: [] for name in settings.site_names}
        self._missing_sites: Set[str] = set()
        self._reconcile_task: Optional[asyncio.Task] = None

    def start(self):
        """Fills every site right away, then keeps them topped up."""
        self.reconcile()
        if self._reconcile_task is None or self._reconcile_task.done():
            self._reconcile_task = asyncio.create_task(self._reconcile_loop(), name="SiteReconcile")

    async def _reconcile_loop(self):
        log.info("Site reconcile loop started. Interval: %.0f seconds.", self.reconcile_interval)
        while True:
            try:
                await asyncio.sleep(self.reconcile_interval)
                self.reconcile()
            except asyncio.CancelledError:
                log.info("Site reconcile loop cancelled.")
                break
            except Exception:
                log.exception("Site reconcile pass failed.")

    def reconcile(self) -> int:
        """Prunes dead entities and spawns replacements up to the target. Returns the number spawned."""
        spawned = 0
        for name, entities in self.sites.items():
            entities[:] = [e for e in entities if e.is_alive()]
            for _ in range(self.settings.population - len(entities)):
                entity = self._spawn_at(name)
                if entity is None:
                    break
                entities.append(entity)
                spawned += 1
        if spawned:
            log.debug("Site reconcile spawned %d entities.", spawned)
        return spawned

    def _spawn_at(self, name: str) -> Optional["Entity"]:
        center = self.world.get_site_position(name)
        if center is None:
            if name not in self._missing_sites:
                log.warning("Site '%s' does not exist on this map, skipping it.", name)
                self._missing_sites.add(name)
            return None

        position = placement.find_position_around(
            self.world, center, 0.0, timing.SITE_SPAWN_RADIUS, self.rng) or center
        entity = self.world.create_entity(timing.HORDE_ENTITY_KIND, position)
        if entity is None:
            return None
        outfit_entity(entity, self.settings.display_name, self.settings.health, self.settings.kits,
                      self.behaviour.throw_grenades, self.rng)
        return entity

    def count(self, name: Optional[str] = None) -> int:
        if name is not None:
            return len(self.sites.get(name, []))
        return sum(len(entities) for entities in self.sites.values())

    def despawn_all(self) -> int:
        killed = 0
        for entities in self.sites.values():
            for entity in entities:
                if not entity.is_destroyed:
                    self.world.destroy_entity(entity, leave_corpse=self.destroy.leave_corpse)
                    killed += 1
            entities.clear()
        if killed:
            log.info("Despawned %d site entities.", killed)
        return killed

    def shutdown(self):
        if self._reconcile_task is not None:
            self._reconcile_task.cancel()
            self._reconcile_task = None
        self.despawn_all()

    def status(self) -> Dict[str, int]:
        return {name: len(entities) for name, entities in self.sites.items()}
