# horde/scheduler.py
"""
Top-level spawn scheduler: fans clock events out to every wave controller
and routes death reports to the wave that owns the entity.
"""
import random
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .settings import HordeConfig, WaveDefinition
from .wave import WaveController

if TYPE_CHECKING:
    from .clock import GameClock
    from .entity import Entity
    from .world import World

log = logging.getLogger(__name__)


class SpawnScheduler:
    def __init__(self, config: HordeConfig, world: "World", clock: "GameClock",
                 rng: Optional[random.Random] = None, **wave_timings: float):
        self.config = config
        self.days_since_last_spawn: int = 0

        definitions = config.spawn_waves or (WaveDefinition(),)
        if not config.spawn_waves:
            log.warning("No spawn waves configured, using a default wave.")
        rng = rng or random.Random()
        self.waves: List[WaveController] = [
            WaveController(definition, world, clock, behaviour=config.behaviour, destroy=config.destroy,
                           rng=rng, **wave_timings)
            for definition in definitions
        ]

    def get_wave(self, name: str) -> Optional[WaveController]:
        for wave in self.waves:
            if wave.name == name:
                return wave
        return None

    def start(self):
        for wave in self.waves:
            wave.start()

    def on_time_tick(self, now: Optional[float] = None):
        for wave in self.waves:
            wave.on_time_tick(now)

    def on_day_advance(self):
        self.days_since_last_spawn += 1
        for wave in self.waves:
            wave.on_day_advance()

    def on_entity_death(self, entity: "Entity") -> bool:
        """Hands the death to the first wave that owns the entity."""
        for wave in self.waves:
            if wave.on_entity_death(entity):
                return True
        return False

    def force_spawn(self):
        for wave in self.waves:
            wave.force_spawn()

    def despawn_all(self) -> int:
        return sum(wave.despawn_all() for wave in self.waves)

    def shutdown(self):
        for wave in self.waves:
            wave.shutdown()

    def status(self) -> List[Dict[str, Any]]:
        return [wave.status() for wave in self.waves]
