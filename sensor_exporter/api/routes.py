from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..core.config import settings
from ..core.timeutil import now_utc
from ..metrics.registry import MetricsRegistry
from ..sensors.base import Absent, Present, SourceSlot
from ..sensors.simulated import PatternConfig, SimulatedClimateSource, SimulatedLightSource
from ..services.poller import PollingService
from .schemas import SimManualRequest, SimPatternRequest

logger = logging.getLogger(__name__)

router = APIRouter()
metrics_router = APIRouter()

SimSource = SimulatedClimateSource | SimulatedLightSource


# --- Dependency getters ---
# main.py wires the real objects in via app.dependency_overrides.
def get_poller() -> PollingService:  # overridden in main
    raise RuntimeError("Poller dependency not configured")

def get_registry() -> MetricsRegistry:  # overridden in main
    raise RuntimeError("Registry dependency not configured")

def get_slots() -> list[SourceSlot]:  # overridden in main
    raise RuntimeError("Sensor slots dependency not configured")


def _outcome_dict(o):
    if o is None:
        return None
    return {
        "ts_utc": o.ts_utc.isoformat(),
        "ok": o.ok,
        "error": o.error,
        "series_written": o.series_written,
    }


@metrics_router.get("/metrics")
def metrics(registry: MetricsRegistry = Depends(get_registry)):
    return Response(content=registry.render(), media_type=registry.content_type)


@router.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name, "mode": settings.sensor_mode}


@router.get("/live")
async def get_live(svc: PollingService = Depends(get_poller)):
    live = svc.live
    return {
        "app": settings.app_name,
        "mode": live.mode,
        "now_utc": now_utc().isoformat(),
        "running": live.running,
        "interval_s": live.interval_s,
        "cycles": live.cycles,
        "last_cycle_started": live.last_cycle_started.isoformat() if live.last_cycle_started else None,
        "last_cycle_duration_s": live.last_cycle_duration_s,
        "sources": {sid: _outcome_dict(o) for sid, o in live.sources.items()},
    }


@router.get("/sensors")
async def list_sensors(
    slots: list[SourceSlot] = Depends(get_slots),
    svc: PollingService = Depends(get_poller),
):
    out = []
    for slot in slots:
        if isinstance(slot, Present):
            out.append({
                "sensor_id": slot.sensor_id,
                "location": slot.location,
                "state": "present",
                "kind": type(slot.source).__name__,
                "last_outcome": _outcome_dict(svc.live.sources.get(slot.sensor_id)),
            })
        elif isinstance(slot, Absent):
            out.append({
                "sensor_id": slot.sensor_id,
                "location": slot.location,
                "state": "absent",
                "error": slot.error,
            })
    return out


# --- Simulator controls (sensor_mode=sim only) ---
def _sim_sources(slots: list[SourceSlot]) -> dict[str, SimSource]:
    return {
        s.sensor_id: s.source
        for s in slots
        if isinstance(s, Present) and isinstance(s.source, (SimulatedClimateSource, SimulatedLightSource))
    }


def _get_sim(sensor_id: str, slots: list[SourceSlot]) -> SimSource:
    sims = _sim_sources(slots)
    if not sims:
        raise HTTPException(status_code=409, detail="Simulated sensors not available (sensor_mode is not 'sim').")
    sim = sims.get(sensor_id)
    if sim is None:
        raise HTTPException(status_code=404, detail=f"Unknown simulated sensor: {sensor_id}")
    return sim


@router.get("/sim/status")
async def sim_status(slots: list[SourceSlot] = Depends(get_slots)):
    sims = _sim_sources(slots)
    if not sims:
        raise HTTPException(status_code=409, detail="Simulated sensors not available (sensor_mode is not 'sim').")
    return {sid: sim.status() for sid, sim in sims.items()}


@router.post("/sim/{sensor_id}/enable")
async def sim_enable(sensor_id: str, slots: list[SourceSlot] = Depends(get_slots)):
    sim = _get_sim(sensor_id, slots)
    sim.enable()
    return {"ok": True, "sensor_id": sensor_id, "enabled": True}


@router.post("/sim/{sensor_id}/disable")
async def sim_disable(sensor_id: str, slots: list[SourceSlot] = Depends(get_slots)):
    sim = _get_sim(sensor_id, slots)
    sim.disable()
    logger.info("Simulated sensor %s disabled; reads will fail", sensor_id)
    return {"ok": True, "sensor_id": sensor_id, "enabled": False}


@router.post("/sim/{sensor_id}/manual")
async def sim_set_manual(sensor_id: str, req: SimManualRequest, slots: list[SourceSlot] = Depends(get_slots)):
    sim = _get_sim(sensor_id, slots)
    values = req.channel_values()
    if not values:
        raise HTTPException(status_code=400, detail="No values given")
    try:
        sim.set_manual(values)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"{sensor_id} has no channel(s): {e.args[0]}")
    return {"ok": True, "sensor_id": sensor_id, "manual": values}


@router.post("/sim/{sensor_id}/pattern")
async def sim_set_pattern(sensor_id: str, req: SimPatternRequest, slots: list[SourceSlot] = Depends(get_slots)):
    sim = _get_sim(sensor_id, slots)
    cfg = PatternConfig(**req.model_dump(exclude={"channel"}))
    try:
        sim.set_pattern(req.channel, cfg)
    except KeyError:
        raise HTTPException(status_code=400, detail=f"{sensor_id} has no channel: {req.channel}")
    return {"ok": True, "sensor_id": sensor_id, "channel": req.channel, "pattern": cfg.__dict__}
