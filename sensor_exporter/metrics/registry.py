from __future__ import annotations

import logging
from typing import Mapping, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Gauge,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

logger = logging.getLogger(__name__)


TEMPERATURE = "sensor_temperature_celsius"
HUMIDITY = "sensor_humidity_percent"
ABSOLUTE_HUMIDITY = "sensor_absolute_humidity_g_m3"
PRESSURE = "sensor_pressure_hpa"
ILLUMINANCE = "sensor_illuminance_lux"
LIGHT_RAW = "sensor_light_raw"

# name -> (help, label names)
METRIC_DEFS: dict[str, tuple[str, tuple[str, ...]]] = {
    TEMPERATURE: ("Temperature in Celsius", ("device", "location")),
    HUMIDITY: ("Relative Humidity in Percent", ("device", "location")),
    ABSOLUTE_HUMIDITY: (
        "Absolute Humidity in g/m^3 (Calculated via Bolton's equation)",
        ("device", "location"),
    ),
    PRESSURE: ("Pressure in hPa", ("device", "location")),
    ILLUMINANCE: ("Illuminance in Lux (Calculated)", ("device", "location")),
    LIGHT_RAW: ("Raw light sensor values", ("device", "location", "type")),
}


class UnknownMetricError(KeyError):
    pass


class MetricsRegistry:
    """Last-value gauge store backed by a private prometheus CollectorRegistry.

    prometheus_client guards each child with its own lock, so one writer
    (the poller) and any number of scrapes can run concurrently.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, with_process_metrics: bool = False) -> None:
        self.registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {
            name: Gauge(name, help_text, labelnames=labels, registry=self.registry)
            for name, (help_text, labels) in METRIC_DEFS.items()
        }
        if with_process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)

    def set_value(self, metric_name: str, labels: Mapping[str, str], value: float) -> None:
        gauge = self._gauges.get(metric_name)
        if gauge is None:
            raise UnknownMetricError(metric_name)
        gauge.labels(**labels).set(float(value))

    def get_value(self, metric_name: str, labels: Mapping[str, str]) -> Optional[float]:
        """Current value of one series, or None if it was never written."""
        return self.registry.get_sample_value(metric_name, dict(labels))

    def render(self) -> bytes:
        return generate_latest(self.registry)
