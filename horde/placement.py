# horde/placement.py
"""
Best-effort search for open ground to spawn on.

Every search is bounded to PLACEMENT_ATTEMPTS random samples and always
returns, so callers must tolerate the occasional poor spot.
"""
import random
import logging
from typing import TYPE_CHECKING, Optional

from .entity import Position
from .definitions import timing

if TYPE_CHECKING:
    from .world import World

log = logging.getLogger(__name__)


def is_open_ground(world: "World", position: Position) -> bool:
    """A spawn point must be above terrain, clear of obstructions and out of deep water."""
    return (
        not world.is_inside_terrain(position)
        and not world.overlaps_obstacle(position, timing.OBSTRUCTION_RADIUS, timing.SPAWN_LAYERS)
        and world.get_water_depth(position) <= timing.SHALLOW_WATER_DEPTH
    )


def _sample(world: "World", x: float, z: float) -> Position:
    return Position(x, world.get_height(x, z) + timing.SPAWN_HEIGHT_OFFSET, z)


def find_open_ground_position(world: "World", rng: Optional[random.Random] = None) -> Position:
    """
    Samples the whole map. Falls back to ground level at the world origin
    when no sample was acceptable.
    """
    rng = rng or random
    half_x, half_z = world.size_x / 2, world.size_z / 2
    for _ in range(timing.PLACEMENT_ATTEMPTS):
        position = _sample(world, rng.uniform(-half_x, half_x), rng.uniform(-half_z, half_z))
        if is_open_ground(world, position):
            return position

    log.debug("No open ground found in %d attempts, using the world origin.", timing.PLACEMENT_ATTEMPTS)
    return Position(0.0, world.get_height(0.0, 0.0), 0.0)


def find_position_around(world: "World", anchor: Position, min_distance: float, max_distance: float,
                         rng: Optional[random.Random] = None) -> Optional[Position]:
    """
    Samples the square of half-size max_distance around the anchor. A sample
    must also lie farther than min_distance from it, measured on the ground
    plane. Returns None on failure.
    """
    rng = rng or random
    for _ in range(timing.PLACEMENT_ATTEMPTS):
        x = rng.uniform(anchor.x - max_distance, anchor.x + max_distance)
        z = rng.uniform(anchor.z - max_distance, anchor.z + max_distance)
        if not world.contains(x, z):
            continue
        position = _sample(world, x, z)
        if is_open_ground(world, position) and anchor.horizontal_distance_to(position) > min_distance:
            return position
    return None


def find_position_around_player(world: "World", anchor: Position, min_distance: float, max_distance: float,
                                rng: Optional[random.Random] = None) -> Position:
    """Near-player placement, widening to the whole map when nothing nearby works."""
    position = find_position_around(world, anchor, min_distance, max_distance, rng)
    if position is None:
        log.debug("No spot found around %s, falling back to a map-wide search.", anchor)
        return find_open_ground_position(world, rng)
    return position
