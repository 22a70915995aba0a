from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union

from .errors import SensorActivationError

logger = logging.getLogger(__name__)


class SensorSource(ABC):
    """Domain-facing sensor abstraction. One instance per physical device."""

    def __init__(self, sensor_id: str, location: str) -> None:
        self._sensor_id = sensor_id
        self._location = location

    @property
    def sensor_id(self) -> str:
        return self._sensor_id

    @property
    def location(self) -> str:
        return self._location

    @abstractmethod
    def activate(self) -> None:
        """Start the device. Raise SensorActivationError on failure."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sensor_id={self._sensor_id!r}, location={self._location!r})"


class ClimateSource(SensorSource):
    """Temperature + relative humidity, optionally barometric pressure."""

    has_pressure: bool = False

    @abstractmethod
    def read_temperature(self) -> float:
        """Degrees Celsius. Raise SensorReadError on failure."""
        ...

    @abstractmethod
    def read_humidity(self) -> float:
        """Relative humidity in %. Raise SensorReadError on failure."""
        ...

    def read_pressure(self) -> float:
        """Pressure in Pa. Raise SensorReadError on failure."""
        raise NotImplementedError(f"{self.sensor_id} has no pressure channel")


class LightSource(SensorSource):
    """Dual-channel light sensor (broadband + infrared photodiodes)."""

    @abstractmethod
    def read_luminosity(self) -> tuple[int, int]:
        """(broadband, infrared) from one bus transaction."""
        ...

    @abstractmethod
    def compute_illuminance(self, broadband: int, infrared: int) -> float:
        """Pure conversion of raw channel counts to lux."""
        ...


@dataclass(frozen=True)
class Present:
    source: SensorSource

    @property
    def sensor_id(self) -> str:
        return self.source.sensor_id

    @property
    def location(self) -> str:
        return self.source.location


@dataclass(frozen=True)
class Absent:
    sensor_id: str
    location: str
    error: str


SourceSlot = Union[Present, Absent]


def activate(source: SensorSource) -> SourceSlot:
    """Activate once. A failed source stays Absent for the process lifetime."""
    try:
        source.activate()
    except SensorActivationError as e:
        logger.warning("%s init failed: %s", source.sensor_id, e.cause)
        return Absent(source.sensor_id, source.location, str(e.cause))
    except Exception as e:
        logger.exception("%s init failed unexpectedly: %s", source.sensor_id, e)
        return Absent(source.sensor_id, source.location, str(e))
    logger.info("%s initialized (location=%s)", source.sensor_id, source.location)
    return Present(source)


def present_sources(slots: list[SourceSlot]) -> list[SensorSource]:
    return [s.source for s in slots if isinstance(s, Present)]
