from fastapi import APIRouter, Depends, HTTPException, Request
from typing import Any, Dict
from ..models.horde import DespawnResult, HordeStatus, WaveStatus

router = APIRouter(prefix="/horde", tags=["horde"])

def get_lifecycle(request: Request):
    lifecycle = getattr(request.app.state, "lifecycle", None)
    if lifecycle is None:
        raise HTTPException(status_code=503, detail="Horde is not running")
    return lifecycle

@router.get("/status", response_model=HordeStatus)
async def get_status(lifecycle=Depends(get_lifecycle)):
    """Clock position, day counter and live counts for every wave and site"""
    return lifecycle.status()

@router.get("/waves/{wave_name}", response_model=WaveStatus)
async def get_wave(wave_name: str, lifecycle=Depends(get_lifecycle)):
    """Status of a single wave"""
    wave = lifecycle.scheduler.get_wave(wave_name)
    if not wave:
        raise HTTPException(status_code=404, detail="Wave not found")
    return wave.status()

@router.get("/config")
async def get_config(lifecycle=Depends(get_lifecycle)) -> Dict[str, Any]:
    """The loaded configuration, keyed the same way as the config file"""
    return lifecycle.config.model_dump(mode="json", by_alias=True)

@router.post("/forcespawn", response_model=HordeStatus)
async def force_spawn(lifecycle=Depends(get_lifecycle)):
    """Fill every wave now; forced waves clear themselves after ten minutes"""
    lifecycle.force_spawn()
    return lifecycle.status()

@router.post("/despawn", response_model=DespawnResult)
async def despawn_all(lifecycle=Depends(get_lifecycle)):
    """Remove every wave and site entity immediately"""
    counts = lifecycle.despawn_all()
    return DespawnResult(waves=counts["waves"], sites=counts["sites"],
                         total=counts["waves"] + counts["sites"])
