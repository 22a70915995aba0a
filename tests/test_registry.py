import math

import pytest

from sensor_exporter.metrics import registry as m
from sensor_exporter.metrics.registry import MetricsRegistry, UnknownMetricError


def test_last_write_wins():
    reg = MetricsRegistry()
    labels = {"device": "bme280", "location": "indoor"}
    reg.set_value(m.TEMPERATURE, labels, 20.0)
    reg.set_value(m.TEMPERATURE, labels, 21.5)
    assert reg.get_value(m.TEMPERATURE, labels) == 21.5


def test_series_created_on_first_write():
    reg = MetricsRegistry()
    labels = {"device": "sht2x", "location": "indoor"}
    assert reg.get_value(m.HUMIDITY, labels) is None
    reg.set_value(m.HUMIDITY, labels, 50.0)
    assert reg.get_value(m.HUMIDITY, labels) == 50.0


def test_light_raw_has_type_label():
    reg = MetricsRegistry()
    reg.set_value(m.LIGHT_RAW, {"device": "tsl2561", "location": "indoor", "type": "infrared"}, 20)
    text = reg.render().decode()
    assert 'sensor_light_raw{device="tsl2561",location="indoor",type="infrared"} 20.0' in text


def test_non_finite_values_accepted():
    reg = MetricsRegistry()
    labels = {"device": "bme280", "location": "indoor"}
    reg.set_value(m.ABSOLUTE_HUMIDITY, labels, math.inf)
    assert reg.get_value(m.ABSOLUTE_HUMIDITY, labels) == math.inf


def test_unknown_metric_rejected():
    with pytest.raises(UnknownMetricError):
        MetricsRegistry().set_value("sensor_co2_ppm", {"device": "x", "location": "y"}, 1.0)


def test_wrong_labels_rejected():
    with pytest.raises(ValueError):
        MetricsRegistry().set_value(m.TEMPERATURE, {"device": "x"}, 1.0)


def test_help_text_exposed():
    text = MetricsRegistry().render().decode()
    assert "# HELP sensor_pressure_hpa Pressure in hPa" in text
    assert "# TYPE sensor_temperature_celsius gauge" in text


def test_registries_are_independent():
    a, b = MetricsRegistry(), MetricsRegistry()
    labels = {"device": "bme280", "location": "indoor"}
    a.set_value(m.PRESSURE, labels, 1000.0)
    assert b.get_value(m.PRESSURE, labels) is None
