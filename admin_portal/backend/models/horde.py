from pydantic import BaseModel
from typing import Dict, List

class WaveStatus(BaseModel):
    name: str
    state: str
    spawned: bool
    live: int
    population: int
    submerged: int = 0
    spawn_time: float
    destroy_time: float
    days_since_spawned: int = 0

class HordeStatus(BaseModel):
    started: bool
    time_of_day: float
    day: int
    days_since_last_spawn: int
    waves: List[WaveStatus]
    sites: Dict[str, int]

class DespawnResult(BaseModel):
    waves: int
    sites: int
    total: int
