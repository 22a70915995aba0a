from __future__ import annotations

import logging
from typing import Any

from .base import ClimateSource
from .errors import SensorActivationError, SensorReadError

logger = logging.getLogger(__name__)


class SHT2xSource(ClimateSource):
    """Sensirion SHT2x temperature / humidity sensor.

    The SHT21 shares the HTU21D command set, so the HTU21D driver is used.
    """

    def __init__(
        self,
        bus: Any,
        address: int = 0x40,
        sensor_id: str = "sht2x",
        location: str = "indoor",
    ) -> None:
        super().__init__(sensor_id, location)
        self._bus = bus
        self._address = address
        self._dev: Any = None

    def activate(self) -> None:
        try:
            from adafruit_htu21d import HTU21D

            self._dev = HTU21D(self._bus, address=self._address)
        except Exception as e:
            raise SensorActivationError(self.sensor_id, e) from e

    def read_temperature(self) -> float:
        try:
            return float(self._dev.temperature)
        except Exception as e:
            raise SensorReadError(self.sensor_id, "temperature", e) from e

    def read_humidity(self) -> float:
        try:
            return float(self._dev.relative_humidity)
        except Exception as e:
            raise SensorReadError(self.sensor_id, "humidity", e) from e
