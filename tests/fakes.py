from __future__ import annotations

import asyncio
from typing import Mapping

from sensor_exporter.sensors.base import ClimateSource, LightSource
from sensor_exporter.sensors.errors import SensorActivationError, SensorReadError


FIXTURE_LUX = 42.5


class FakeClimateSource(ClimateSource):
    def __init__(self, sensor_id="bme280", location="indoor", has_pressure=True,
                 temperature=22.0, humidity=45.0, pressure=101325.0, fail_activation=False):
        super().__init__(sensor_id, location)
        self.has_pressure = has_pressure
        self.values = {"temperature": temperature, "humidity": humidity, "pressure": pressure}
        self.failing: set[str] = set()
        self.fail_activation = fail_activation
        self.reads: list[str] = []
        self.activations = 0

    def activate(self):
        self.activations += 1
        if self.fail_activation:
            raise SensorActivationError(self.sensor_id, "no ACK at address")

    def _read(self, kind):
        self.reads.append(kind)
        if kind in self.failing:
            raise SensorReadError(self.sensor_id, kind, "i2c timeout")
        return self.values[kind]

    def read_temperature(self):
        return self._read("temperature")

    def read_humidity(self):
        return self._read("humidity")

    def read_pressure(self):
        return self._read("pressure")


class FakeLightSource(LightSource):
    def __init__(self, sensor_id="tsl2561", location="indoor", broadband=100, infrared=20):
        super().__init__(sensor_id, location)
        self.luminosity = (broadband, infrared)
        self.fail = False
        self.reads = 0
        self.conversions: list[tuple[int, int]] = []

    def activate(self):
        pass

    def read_luminosity(self):
        self.reads += 1
        if self.fail:
            raise SensorReadError(self.sensor_id, "luminosity", "bus error")
        return self.luminosity

    def compute_illuminance(self, broadband, infrared):
        self.conversions.append((broadband, infrared))
        return FIXTURE_LUX


class RecordingSink:
    """MetricsSink double that keeps every write and the latest value per series."""

    def __init__(self):
        self.writes: list[tuple[str, dict, float]] = []
        self.values: dict[tuple, float] = {}

    def set_value(self, metric_name: str, labels: Mapping[str, str], value: float) -> None:
        self.writes.append((metric_name, dict(labels), value))
        self.values[(metric_name, tuple(sorted(labels.items())))] = value

    def get(self, metric_name, **labels):
        return self.values.get((metric_name, tuple(sorted(labels.items()))))

    def writes_for(self, device):
        return [w for w in self.writes if w[1]["device"] == device]


class ManualTicker:
    """Ticker driven by the test: each release() lets one cycle through."""

    def __init__(self):
        self._sem = asyncio.Semaphore(0)
        self.waits = 0

    def release(self, n: int = 1) -> None:
        for _ in range(n):
            self._sem.release()

    async def wait(self) -> None:
        self.waits += 1
        await self._sem.acquire()
