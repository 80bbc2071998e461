# horde/definitions/timing.py
"""
Fixed timings and thresholds for the horde lifecycle engine.
All durations are real seconds unless noted otherwise.
"""

# --- Batches ---
SPAWN_STEP_DELAY_SECONDS: float = 0.1       # Pause between two spawns/kills of a batch
FORCED_SPAWN_DURATION_SECONDS: float = 600.0  # Forced waves are cleared after 10 minutes

# --- Submersion watchdog ---
SUBMERSION_CHECK_INTERVAL_SECONDS: float = 1.0
SUBMERSION_LIMIT_SECONDS: float = 10.0
HEAD_HEIGHT_WATER_DEPTH: float = 1.6        # Water deeper than this covers an entity's head

# --- Persistent sites ---
SITE_RECONCILE_INTERVAL_SECONDS: float = 60.0
SITE_SPAWN_RADIUS: float = 20.0

# --- Placement ---
PLACEMENT_ATTEMPTS: int = 6
SPAWN_HEIGHT_OFFSET: float = 0.5
OBSTRUCTION_RADIUS: float = 0.5
SHALLOW_WATER_DEPTH: float = 0.25
SPAWN_LAYERS = frozenset({
    "Default",
    "Tree",
    "Construction",
    "World",
    "Vehicle_Detailed",
    "Deployed",
})

# --- Entities ---
HORDE_ENTITY_KIND: str = "scarecrow.prefab"
GRENADE_ITEM: str = "grenade.f1"
