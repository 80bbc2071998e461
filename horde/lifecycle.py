# horde/lifecycle.py
"""
Process-wide entry point of the horde engine.

Wires the game clock to the spawn scheduler, forwards host death reports,
persists the days-since-spawn counter and exposes the administrative
actions (force spawn, despawn everything).
"""
import asyncio
import random
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from .definitions import timing
from .scheduler import SpawnScheduler
from .settings import HordeConfig
from .sites import SiteController
from .targeting import TargetFilter

if TYPE_CHECKING:
    from .clock import GameClock
    from .database import DatabaseManager
    from .entity import Entity
    from .world import Player, World

log = logging.getLogger(__name__)


class HordeLifecycle:
    def __init__(self, config: HordeConfig, world: "World", clock: "GameClock",
                 db_manager: "DatabaseManager", rng: Optional[random.Random] = None,
                 **wave_timings: float):
        self.config = config
        self.world = world
        self.clock = clock
        self.db_manager = db_manager
        rng = rng or random.Random()
        self.scheduler = SpawnScheduler(config, world, clock, rng=rng, **wave_timings)
        self.sites = SiteController(config.sites, world, behaviour=config.behaviour,
                                    destroy=config.destroy, rng=rng)
        self.targeting = TargetFilter(config.behaviour)
        self.started: bool = False
        self._clock_attached: bool = False

    @property
    def days_since_last_spawn(self) -> int:
        return self.scheduler.days_since_last_spawn

    # --- Startup & Shutdown ---
    async def start(self):
        self.scheduler.days_since_last_spawn = await self._load_days_since_spawn()
        self.scheduler.start()
        self.sites.start()

        if self.config.spawn_waves:
            self.clock.attach_minute(self.on_minute)
            self.clock.attach_day(self.on_day)
            self._clock_attached = True
        else:
            log.warning("No spawn waves configured; the default wave only spawns when forced.")

        self.world.subscribe_death(self.on_entity_death)
        self.started = True
        log.info("Horde started: %d waves, %d sites, %d days since last spawn.",
                 len(self.scheduler.waves), len(self.sites.sites), self.days_since_last_spawn)

    async def shutdown(self):
        """Detaches from the host, saves state and removes every horde entity."""
        if self._clock_attached:
            self.clock.detach_minute(self.on_minute)
            self.clock.detach_day(self.on_day)
            self._clock_attached = False
        self.world.unsubscribe_death(self.on_entity_death)

        await self.save_state()
        self.scheduler.shutdown()
        self.sites.shutdown()
        self.started = False
        log.info("Horde shut down.")

    async def _load_days_since_spawn(self) -> int:
        try:
            days = await self.db_manager.get_days_since_spawn()
        except Exception:
            log.warning("Failed to load saved days since last spawn, defaulting to 0", exc_info=True)
            return 0
        return days or 0

    async def save_state(self) -> bool:
        """Persists the day counter and the clock. Failures are logged, never raised."""
        try:
            await self.db_manager.save_days_since_spawn(self.days_since_last_spawn)
            await self.db_manager.save_game_time(self.clock.minute_of_day, self.clock.day)
            return True
        except Exception:
            log.error("Failed to save horde state.", exc_info=True)
            return False

    # --- Host events ---
    def on_minute(self, time_of_day: float):
        self.scheduler.on_time_tick(time_of_day)

    def on_day(self):
        self.scheduler.on_day_advance()

    def on_entity_death(self, entity: "Entity", attacker: Optional["Player"] = None):
        self.scheduler.on_entity_death(entity)
        if entity.kind != timing.HORDE_ENTITY_KIND:
            return
        # The host finishes its own death handling first; the body is dealt with on the next loop pass.
        asyncio.get_running_loop().call_soon(self._process_body, entity.instance_id)

    def _process_body(self, entity_id: int):
        destroy = self.config.destroy
        corpse = self.world.get_corpse(entity_id)
        if corpse is None:
            return
        if not destroy.leave_corpse_killed:
            self.world.remove_corpse(entity_id)
            return
        if not destroy.spawn_loot:
            corpse.loot.clear()
        if destroy.half_bodybag_despawn:
            corpse.despawn_seconds /= 2

    def can_target(self, target: Any) -> bool:
        """Host combat hook: may a horde entity attack this target?"""
        return not self.targeting.should_ignore(target)

    def sentry_may_target(self, entity: "Entity") -> bool:
        """Host sentry hook: may an outpost sentry shoot at this entity?"""
        if entity.kind != timing.HORDE_ENTITY_KIND:
            return True
        return self.targeting.sentries_may_target()

    # --- Administrative actions ---
    def force_spawn(self):
        log.info("Admin: forcing every wave to full population.")
        self.scheduler.force_spawn()

    def despawn_all(self) -> Dict[str, int]:
        log.info("Admin: despawning every wave and site.")
        return {
            "waves": self.scheduler.despawn_all(),
            "sites": self.sites.despawn_all(),
        }

    def status(self) -> Dict[str, Any]:
        return {
            "started": self.started,
            "time_of_day": round(self.clock.time_of_day, 2),
            "day": self.clock.day,
            "days_since_last_spawn": self.days_since_last_spawn,
            "waves": self.scheduler.status(),
            "sites": self.sites.status(),
        }
