from __future__ import annotations

import logging

from ..core.config import Settings
from .base import SensorSource, SourceSlot, activate, present_sources
from .bme280 import BME280Source
from .i2c_bus import open_bus
from .sht2x import SHT2xSource
from .simulated import SimulatedClimateSource, SimulatedLightSource
from .tsl2561 import TSL2561Source, TSL2561Timing

logger = logging.getLogger(__name__)


def _tsl_timing(cfg: Settings) -> TSL2561Timing:
    return TSL2561Timing(gain_16x=cfg.tsl2561_gain_16x, integration=cfg.tsl2561_integration)


def build_hardware_sources(cfg: Settings) -> list[SensorSource]:
    # Raises BusUnavailableError: nothing can be read without the bus
    bus = open_bus()

    sources: list[SensorSource] = []
    if cfg.enable_bme280:
        sources.append(BME280Source(bus, address=cfg.bme280_address, location=cfg.location))
    if cfg.enable_sht2x:
        sources.append(SHT2xSource(bus, address=cfg.sht2x_address, location=cfg.location))
    if cfg.enable_tsl2561:
        sources.append(
            TSL2561Source(bus, address=cfg.tsl2561_address, timing=_tsl_timing(cfg), location=cfg.location)
        )
    return sources


def build_simulated_sources(cfg: Settings) -> list[SensorSource]:
    sources: list[SensorSource] = []
    if cfg.enable_bme280:
        sources.append(SimulatedClimateSource("bme280", cfg.location, has_pressure=True))
    if cfg.enable_sht2x:
        sources.append(SimulatedClimateSource("sht2x", cfg.location, has_pressure=False))
    if cfg.enable_tsl2561:
        sources.append(SimulatedLightSource("tsl2561", cfg.location, timing=_tsl_timing(cfg)))
    return sources


def build_slots(cfg: Settings) -> list[SourceSlot]:
    """Construct and activate every configured source exactly once."""
    mode = cfg.sensor_mode.lower()
    if mode == "i2c":
        sources = build_hardware_sources(cfg)
    elif mode == "sim":
        sources = build_simulated_sources(cfg)
    else:
        raise ValueError(f"Unsupported sensor_mode: {cfg.sensor_mode}")

    logger.info("Initializing sensors (mode=%s)...", mode)
    slots = [activate(s) for s in sources]

    logger.info("%d of %d sensors present", len(present_sources(slots)), len(slots))
    return slots
