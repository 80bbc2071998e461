# horde/wave.py
"""
Wave controller: owns one named population and drives it through the
IDLE -> POPULATING -> ACTIVE -> CLEARING -> IDLE cycle once per game minute.

Spawning and clearing happen in batches, one entity per step with a short
pause between steps. A batch is an asyncio task; at most one runs per wave
and starting another cancels it. A separate watchdog task evicts entities
that stay under water too long.
"""
import asyncio
import random
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Coroutine, Dict, List, Optional

from . import placement
from .entity import outfit_entity
from .definitions import timing
from .settings import BehaviourSettings, DestroySettings, WaveDefinition

if TYPE_CHECKING:
    from .clock import GameClock
    from .entity import Entity, Position
    from .world import Player, World

log = logging.getLogger(__name__)


# --- Time windows ---
def in_spawn_window(spawn_time: float, destroy_time: float, now: float) -> bool:
    """
    When spawn_time > destroy_time the window wraps past midnight and covers
    [spawn_time, 24) + [0, destroy_time). Otherwise it is [0, spawn_time].
    """
    if spawn_time > destroy_time:
        return now >= spawn_time or now < destroy_time
    return now <= spawn_time


def in_destroy_window(spawn_time: float, destroy_time: float, now: float) -> bool:
    """
    Wrapping waves clear during [destroy_time, spawn_time); non-wrapping waves
    clear once now is past destroy_time. Between spawn_time and destroy_time a
    non-wrapping wave is in neither window and keeps what it has.
    """
    if spawn_time > destroy_time:
        return destroy_time <= now < spawn_time
    return now > destroy_time


class WaveState(Enum):
    IDLE = auto()
    POPULATING = auto()
    ACTIVE = auto()
    CLEARING = auto()


class WaveController:
    """Spawns, maintains and removes the entities of a single wave."""

    def __init__(self, definition: WaveDefinition, world: "World", clock: "GameClock",
                 behaviour: Optional[BehaviourSettings] = None,
                 destroy: Optional[DestroySettings] = None,
                 rng: Optional[random.Random] = None,
                 step_delay: float = timing.SPAWN_STEP_DELAY_SECONDS,
                 forced_duration: float = timing.FORCED_SPAWN_DURATION_SECONDS,
                 watchdog_interval: float = timing.SUBMERSION_CHECK_INTERVAL_SECONDS):
        self.definition = definition
        self.world = world
        self.clock = clock
        self.behaviour = behaviour or BehaviourSettings()
        self.destroy = destroy or DestroySettings()
        self.rng = rng or random.Random()
        self.step_delay = step_delay
        self.forced_duration = forced_duration
        self.watchdog_interval = watchdog_interval

        # --- Runtime State ---
        self.spawned: bool = False
        self.entities: List["Entity"] = []
        self.submerged: Dict["Entity", float] = {}
        self.days_since_spawned: int = 0
        self._batch_task: Optional[asyncio.Task] = None
        self._batch_state: Optional[WaveState] = None
        self._forced_despawn_task: Optional[asyncio.Task] = None
        self._watchdog_task: Optional[asyncio.Task] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def population(self) -> int:
        return self.definition.zombies.population

    @property
    def state(self) -> WaveState:
        if self._batch_task is not None and not self._batch_task.done():
            return self._batch_state
        if self.spawned or self.entities:
            return WaveState.ACTIVE
        return WaveState.IDLE

    def is_spawn_time(self, now: Optional[float] = None) -> bool:
        now = self.clock.time_of_day if now is None else now
        return in_spawn_window(self.definition.spawn_time, self.definition.destroy_time, now)

    def is_destroy_time(self, now: Optional[float] = None) -> bool:
        now = self.clock.time_of_day if now is None else now
        return in_destroy_window(self.definition.spawn_time, self.definition.destroy_time, now)

    def roll_chance(self) -> bool:
        """One Bernoulli trial against the wave's chance per cycle (0-100)."""
        return self.rng.random() * 100.0 < self.definition.chance.chance

    # --- Clock events ---
    def on_time_tick(self, now: Optional[float] = None):
        """Evaluates the wave's windows for the current game minute."""
        now = self.clock.time_of_day if now is None else now
        self._prune()

        if not self.spawned:
            # Rolled every tick inside the window until it succeeds.
            if self.is_spawn_time(now) and self.roll_chance():
                self.begin_populating()
            return

        if not self.is_destroy_time(now) or self.state is WaveState.CLEARING:
            return
        if self.entities:
            self.begin_clearing()
        elif self.state is not WaveState.POPULATING:
            log.info("Wave '%s': nothing left to clear, returning to idle.", self.name)
            self._reset()

    def on_day_advance(self):
        self.days_since_spawned += 1

    # --- Batches ---
    def begin_populating(self):
        self.spawned = True
        self.days_since_spawned = 0
        log.info("Wave '%s': spawning %d entities.", self.name, self.population)
        self._start_batch(self._populate(), WaveState.POPULATING)

    def begin_clearing(self):
        log.info("Wave '%s': clearing %d entities.", self.name, len(self.entities))
        self._start_batch(self._clear(), WaveState.CLEARING)

    async def _populate(self):
        for _ in range(self.population):
            self.spawn_entity()
            await asyncio.sleep(self.step_delay)
        log.info("Wave '%s': populated with %d/%d entities.", self.name, len(self.entities), self.population)

    async def _clear(self):
        for entity in list(self.entities):
            if entity.is_destroyed:
                self._forget(entity)
                continue
            self._kill(entity)
            await asyncio.sleep(self.step_delay)
        self._reset()
        log.info("Wave '%s': cleared.", self.name)

    def _start_batch(self, coro: Coroutine[Any, Any, None], state: WaveState):
        self._cancel_batch()
        task = asyncio.create_task(coro, name=f"Wave-{self.name}-{state.name.lower()}")
        task.add_done_callback(self._on_batch_done)
        self._batch_task = task
        self._batch_state = state

    def _cancel_batch(self):
        task = self._batch_task
        self._batch_task = None
        self._batch_state = None
        if task is not None and not task.done():
            task.cancel()
            log.debug("Wave '%s': in-flight batch cancelled.", self.name)

    def _on_batch_done(self, task: asyncio.Task):
        if task is self._batch_task:
            self._batch_task = None
            self._batch_state = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Wave '%s': batch %s failed.", self.name, task.get_name(), exc_info=exc)

    # --- Individual entities ---
    def spawn_entity(self) -> Optional["Entity"]:
        """Spawns one entity unless the wave is already at its target population."""
        self._prune()
        if len(self.entities) >= self.population:
            return None

        position = self._pick_position()
        entity = self.world.create_entity(timing.HORDE_ENTITY_KIND, position)
        if entity is None:
            log.debug("Wave '%s': host refused to create an entity at %s.", self.name, position)
            return None

        settings = self.definition.zombies
        outfit_entity(entity, settings.display_name, settings.health, settings.kits,
                      self.behaviour.throw_grenades, self.rng)
        self.entities.append(entity)
        log.debug("Wave '%s': spawned %r at %s (%d/%d).",
                  self.name, entity, position, len(self.entities), self.population)
        return entity

    def on_entity_death(self, entity: "Entity") -> bool:
        """
        Handles a host death report. Returns False if the entity is not ours.
        While the wave is up and inside its spawn window the loss is replaced at once.
        """
        if entity not in self.entities:
            return False
        self._forget(entity)
        if self.spawned and self.state is not WaveState.CLEARING and self.is_spawn_time():
            self.spawn_entity()
        return True

    def _pick_position(self) -> "Position":
        wave = self.definition
        if wave.spawn_near_players and len(self.world.active_players()) >= wave.min_near_players:
            player = self._pick_anchor_player()
            if player is not None:
                return placement.find_position_around_player(
                    self.world, player.position, wave.min_distance, wave.max_distance, self.rng)
        return placement.find_open_ground_position(self.world, self.rng)

    def _pick_anchor_player(self) -> Optional["Player"]:
        anchors = [p for p in self.world.active_players() if p.is_valid_anchor()]
        return self.rng.choice(anchors) if anchors else None

    def _kill(self, entity: "Entity"):
        if not entity.is_destroyed:
            self.world.destroy_entity(entity, leave_corpse=self.destroy.leave_corpse)
        self._forget(entity)

    def _forget(self, entity: "Entity"):
        if entity in self.entities:
            self.entities.remove(entity)
        self.submerged.pop(entity, None)

    def _prune(self):
        """Drops references the host destroyed or killed without telling us."""
        for entity in list(self.entities):
            if not entity.is_alive():
                self._forget(entity)

    def _reset(self):
        self.entities.clear()
        self.submerged.clear()
        self.spawned = False

    # --- Submersion watchdog ---
    def check_submersion(self, elapsed: float) -> List["Entity"]:
        """
        Adds elapsed seconds to every entity whose head is under water and
        resets the rest. Entities reaching the limit are destroyed. Returns them.
        """
        evicted = []
        for entity in list(self.entities):
            if not entity.is_alive():
                self._forget(entity)
                continue
            if self.world.get_water_depth(entity.position) <= timing.HEAD_HEIGHT_WATER_DEPTH:
                self.submerged.pop(entity, None)
                continue
            submerged_for = self.submerged.get(entity, 0.0) + elapsed
            if submerged_for >= timing.SUBMERSION_LIMIT_SECONDS:
                log.debug("Wave '%s': %r drowned after %.1fs.", self.name, entity, submerged_for)
                self._kill(entity)
                evicted.append(entity)
            else:
                self.submerged[entity] = submerged_for
        return evicted

    async def _watch_submersion(self):
        while True:
            try:
                await asyncio.sleep(self.watchdog_interval)
                self.check_submersion(self.watchdog_interval)
            except asyncio.CancelledError:
                log.debug("Wave '%s': submersion watchdog cancelled.", self.name)
                break
            except Exception:
                log.exception("Wave '%s': submersion check failed.", self.name)

    # --- Administrative ---
    def start(self):
        """Starts the submersion watchdog."""
        if self._watchdog_task is None or self._watchdog_task.done():
            self._watchdog_task = asyncio.create_task(
                self._watch_submersion(), name=f"Wave-{self.name}-watchdog")

    def force_spawn(self):
        """Fills the wave immediately, ignoring windows and chance, and clears it after forced_duration."""
        self._cancel_batch()
        self.spawned = True
        for _ in range(self.population):
            self.spawn_entity()
        self._cancel_forced_despawn()
        self._forced_despawn_task = asyncio.create_task(
            self._forced_despawn(), name=f"Wave-{self.name}-forced-despawn")
        log.info("Wave '%s': forced spawn of %d entities, clearing in %.0fs.",
                 self.name, len(self.entities), self.forced_duration)

    async def _forced_despawn(self):
        await asyncio.sleep(self.forced_duration)
        self._forced_despawn_task = None
        log.info("Wave '%s': forced spawn expired.", self.name)
        self.despawn_all()

    def _cancel_forced_despawn(self):
        task = self._forced_despawn_task
        self._forced_despawn_task = None
        if task is not None and not task.done():
            task.cancel()

    def despawn_all(self) -> int:
        """Cancels pending work and destroys every live entity without delay."""
        self._cancel_batch()
        self._cancel_forced_despawn()
        killed = 0
        for entity in list(self.entities):
            if not entity.is_destroyed:
                self.world.destroy_entity(entity, leave_corpse=self.destroy.leave_corpse)
                killed += 1
        self._reset()
        if killed:
            log.info("Wave '%s': despawned %d entities.", self.name, killed)
        return killed

    def shutdown(self):
        if self._watchdog_task is not None:
            self._watchdog_task.cancel()
            self._watchdog_task = None
        self.despawn_all()

    def status(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "state": self.state.name,
            "spawned": self.spawned,
            "live": len(self.entities),
            "population": self.population,
            "submerged": len(self.submerged),
            "spawn_time": self.definition.spawn_time,
            "destroy_time": self.definition.destroy_time,
            "days_since_spawned": self.days_since_spawned,
        }

    def __repr__(self) -> str:
        return f"<WaveController '{self.name}' {self.state.name} {len(self.entities)}/{self.population}>"
