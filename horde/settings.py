# horde/settings.py
"""
Horde configuration: immutable pydantic models mirroring the JSON config file.

The loaded HordeConfig is built once at startup and handed to every
controller's constructor. Keys in the file use the human readable aliases
below; code uses the field names.
"""
import logging
from pathlib import Path
from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

log = logging.getLogger(__name__)


class _FrozenSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class EntitySettings(_FrozenSettings):
    display_name: str = Field("Scarecrow", alias="Display Name")
    population: int = Field(50, ge=0, alias="Scarecrow Population (total amount)")
    health: float = Field(200.0, gt=0, alias="Scarecrow Health")
    kits: Tuple[str, ...] = Field((), alias="Scarecrow Kits")


class ChanceSettings(_FrozenSettings):
    chance: float = Field(100.0, ge=0, le=100, alias="Chance per cycle")
    # Read and saved but not consulted by the spawn gate.
    days: int = Field(0, ge=0, alias="Days between spawn")


class WaveDefinition(_FrozenSettings):
    """One named, time-windowed population."""
    name: str = Field("Default Wave", alias="Wave Name")
    spawn_time: float = Field(19.8, ge=0, lt=24, alias="Spawn Time")
    destroy_time: float = Field(7.3, ge=0, lt=24, alias="Destroy Time")
    spawn_near_players: bool = Field(False, alias="Spawn near players")
    min_near_players: int = Field(10, ge=0, alias="Min pop for near player spawn")
    min_distance: float = Field(30.0, ge=0, alias="Min distance from player")
    max_distance: float = Field(60.0, gt=0, alias="Max distance from player")
    zombies: EntitySettings = Field(default_factory=EntitySettings, alias="Zombie Settings")
    chance: ChanceSettings = Field(default_factory=ChanceSettings, alias="Chance Settings")

    @model_validator(mode="after")
    def _check_distances(self) -> "WaveDefinition":
        if self.spawn_near_players and self.min_distance >= self.max_distance:
            raise ValueError(
                f"wave '{self.name}': min distance {self.min_distance} must be below max distance {self.max_distance}"
            )
        return self


class SiteSettings(_FrozenSettings):
    """One definition shared by every persistent site."""
    site_names: Tuple[str, ...] = Field((), alias="Site Names")
    population: int = Field(5, ge=0, alias="Population per site")
    display_name: str = Field("Scarecrow", alias="Display Name")
    health: float = Field(200.0, gt=0, alias="Health")
    kits: Tuple[str, ...] = Field((), alias="Kits")


class DestroySettings(_FrozenSettings):
    leave_corpse: bool = Field(False, alias="Leave Corpse, when destroyed")
    leave_corpse_killed: bool = Field(True, alias="Leave Corpse, when killed by player")
    spawn_loot: bool = Field(True, alias="Spawn Loot")
    half_bodybag_despawn: bool = Field(True, alias="Half bodybag despawn time")


class BehaviourSettings(_FrozenSettings):
    attack_sleepers: bool = Field(False, alias="Attack sleeping players")
    sentries_attack: bool = Field(True, alias="Zombies attacked by outpost sentries")
    throw_grenades: bool = Field(True, alias="Throw Grenades")
    ignore_human_npc: bool = Field(True, alias="Ignore Human NPCs")
    ignored: Tuple[str, ...] = Field((), alias="Ignored entities (full entity shortname)")


class HordeConfig(_FrozenSettings):
    spawn_waves: Tuple[WaveDefinition, ...] = Field((), alias="Spawn Waves")
    sites: SiteSettings = Field(default_factory=SiteSettings, alias="Persistent Sites")
    destroy: DestroySettings = Field(default_factory=DestroySettings, alias="Destroy Settings")
    behaviour: BehaviourSettings = Field(default_factory=BehaviourSettings, alias="Behaviour Settings")


def default_config() -> HordeConfig:
    """The built-in configuration used for new installs and unreadable files."""
    return HordeConfig(
        spawn_waves=(WaveDefinition(),),
        behaviour=BehaviourSettings(ignored=("scientistjunkpile.prefab", "scarecrow.prefab")),
    )


def save_config(config: HordeConfig, path: Union[str, Path]) -> bool:
    """Writes the config with its file aliases. Returns False if the write failed."""
    try:
        Path(path).write_text(config.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        return True
    except OSError:
        log.error("Could not write config file %s.", path, exc_info=True)
        return False


def load_config(path: Union[str, Path]) -> HordeConfig:
    """
    Loads the config file, falling back to defaults on any read or validation error.
    A successful load is written back so options added since the file was created appear in it.
    """
    path = Path(path)
    if not path.exists():
        log.warning("Config file %s not found, creating it with default values.", path)
        config = default_config()
        save_config(config, path)
        return config

    try:
        config = HordeConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        log.error("Failed to load config %s, using default values: %s", path, e)
        return default_config()

    log.info("Loaded horde config from %s (%d waves, %d sites).",
             path, len(config.spawn_waves), len(config.sites.site_names))
    save_config(config, path)
    return config
