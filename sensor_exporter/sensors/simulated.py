from __future__ import annotations

import math
import random
import time
from dataclasses import asdict, dataclass
from threading import Lock
from typing import Optional

from .base import ClimateSource, LightSource
from .errors import SensorActivationError, SensorReadError
from .tsl2561 import TSL2561Timing, calculate_lux


@dataclass
class PatternConfig:
    type: str = "sine"     # sine|step|ramp|random
    baseline: float = 22.0
    amplitude: float = 2.0
    period_s: float = 600
    noise: float = 0.0

    step_low: float = 20.0
    step_high: float = 24.0
    step_period_s: float = 120

    ramp_min: float = 18.0
    ramp_max: float = 26.0
    ramp_period_s: float = 600


def pattern_value(cfg: PatternConfig, t: float) -> float:
    if cfg.type == "sine":
        phase = (t % cfg.period_s) / cfg.period_s * 2.0 * math.pi
        v = cfg.baseline + cfg.amplitude * math.sin(phase)

    elif cfg.type == "step":
        half = cfg.step_period_s / 2.0
        v = cfg.step_high if (t % cfg.step_period_s) < half else cfg.step_low

    elif cfg.type == "ramp":
        frac = (t % cfg.ramp_period_s) / cfg.ramp_period_s
        v = cfg.ramp_min + (cfg.ramp_max - cfg.ramp_min) * frac

    elif cfg.type == "random":
        v = cfg.baseline + random.uniform(-cfg.amplitude, cfg.amplitude)

    else:
        v = cfg.baseline

    if cfg.noise > 0:
        v += random.uniform(-cfg.noise, cfg.noise)

    return v


class _SimulatedChannels:
    """Thread-safe channel store shared by the simulated sources.

    Each channel returns its manual value unless a pattern is set for it.
    Disabling the sensor makes every read fail, which exercises the poller's
    failure path without hardware.
    """

    def __init__(self, sensor_id: str, manual: dict[str, float], fail_activation: bool = False):
        self._sim_id = sensor_id
        self._lock = Lock()
        self._enabled = True
        self._manual = dict(manual)
        self._patterns: dict[str, PatternConfig] = {}
        self._fail_activation = fail_activation

    @property
    def channels(self) -> list[str]:
        return list(self._manual)

    def _sim_activate(self) -> None:
        if self._fail_activation:
            raise SensorActivationError(self._sim_id, "simulated device not responding")

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def set_manual(self, values: dict[str, float]) -> None:
        with self._lock:
            unknown = set(values) - set(self._manual)
            if unknown:
                raise KeyError(", ".join(sorted(unknown)))
            for channel, value in values.items():
                self._manual[channel] = float(value)
                self._patterns.pop(channel, None)

    def set_pattern(self, channel: str, cfg: PatternConfig) -> None:
        with self._lock:
            if channel not in self._manual:
                raise KeyError(channel)
            self._patterns[channel] = cfg

    def status(self) -> dict:
        with self._lock:
            return {
                "enabled": self._enabled,
                "manual": dict(self._manual),
                "patterns": {k: asdict(v) for k, v in self._patterns.items()},
            }

    def _read_channel(self, channel: str) -> float:
        return self._read_channels(channel)[0]

    def _read_channels(self, *channels: str) -> list[float]:
        """Snapshot several channels under one lock acquisition."""
        with self._lock:
            if not self._enabled:
                raise SensorReadError(self._sim_id, "/".join(channels), "simulated sensor disabled")
            t = time.time()
            values = []
            for channel in channels:
                cfg: Optional[PatternConfig] = self._patterns.get(channel)
                values.append(self._manual[channel] if cfg is None else pattern_value(cfg, t))
            return values


class SimulatedClimateSource(_SimulatedChannels, ClimateSource):
    def __init__(
        self,
        sensor_id: str,
        location: str = "indoor",
        has_pressure: bool = True,
        temperature: float = 22.0,
        humidity: float = 45.0,
        pressure: float = 101325.0,
        fail_activation: bool = False,
    ) -> None:
        ClimateSource.__init__(self, sensor_id, location)
        manual = {"temperature": temperature, "humidity": humidity}
        if has_pressure:
            manual["pressure"] = pressure
        _SimulatedChannels.__init__(self, sensor_id, manual, fail_activation)
        self.has_pressure = has_pressure

    def activate(self) -> None:
        self._sim_activate()

    def read_temperature(self) -> float:
        return self._read_channel("temperature")

    def read_humidity(self) -> float:
        return max(0.0, min(100.0, self._read_channel("humidity")))

    def read_pressure(self) -> float:
        if not self.has_pressure:
            return super().read_pressure()
        return self._read_channel("pressure")


class SimulatedLightSource(_SimulatedChannels, LightSource):
    def __init__(
        self,
        sensor_id: str,
        location: str = "indoor",
        broadband: float = 100.0,
        infrared: float = 20.0,
        timing: TSL2561Timing = TSL2561Timing(),
        fail_activation: bool = False,
    ) -> None:
        LightSource.__init__(self, sensor_id, location)
        _SimulatedChannels.__init__(
            self, sensor_id, {"broadband": broadband, "infrared": infrared}, fail_activation
        )
        self._timing = timing

    def activate(self) -> None:
        self._sim_activate()

    def read_luminosity(self) -> tuple[int, int]:
        # Both channels come from one simulated "transaction"
        broadband, infrared = self._read_channels("broadband", "infrared")
        return max(0, int(broadband)), max(0, int(infrared))

    def compute_illuminance(self, broadband: int, infrared: int) -> float:
        return float(calculate_lux(broadband, infrared, self._timing))
