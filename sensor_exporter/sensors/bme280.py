from __future__ import annotations

import logging
from typing import Any

from .base import ClimateSource
from .errors import SensorActivationError, SensorReadError

logger = logging.getLogger(__name__)


class BME280Source(ClimateSource):
    """Bosch BME280 temperature / humidity / pressure sensor on I2C."""

    has_pressure = True

    def __init__(
        self,
        bus: Any,
        address: int = 0x77,
        sensor_id: str = "bme280",
        location: str = "indoor",
    ) -> None:
        super().__init__(sensor_id, location)
        self._bus = bus
        self._address = address
        self._dev: Any = None

    def activate(self) -> None:
        try:
            from adafruit_bme280 import basic as adafruit_bme280

            self._dev = adafruit_bme280.Adafruit_BME280_I2C(self._bus, address=self._address)
        except Exception as e:
            raise SensorActivationError(self.sensor_id, e) from e
        logger.debug("BME280 chip found at 0x%02x", self._address)

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

    def read_pressure(self) -> float:
        # Driver reports hPa; sources return Pa and the poller divides back to
        # hPa for sensor_pressure_hpa, which can move the value by one ulp
        try:
            return float(self._dev.pressure) * 100.0
        except Exception as e:
            raise SensorReadError(self.sensor_id, "pressure", e) from e
