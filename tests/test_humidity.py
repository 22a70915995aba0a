import math

import pytest

from sensor_exporter.domain.humidity import compute_absolute_humidity


def test_reference_point():
    assert compute_absolute_humidity(25.0, 50.0) == pytest.approx(11.51, abs=1e-2)


def test_matches_bolton_formula():
    for t, rh in [(-20.0, 80.0), (0.0, 100.0), (22.0, 45.0), (35.5, 12.0)]:
        expected = 6.112 * math.exp(17.67 * t / (t + 243.5)) * rh * 2.1674 / (273.15 + t)
        assert compute_absolute_humidity(t, rh) == expected


def test_deterministic():
    assert compute_absolute_humidity(18.3, 61.7) == compute_absolute_humidity(18.3, 61.7)


def test_zero_humidity_is_zero():
    assert compute_absolute_humidity(20.0, 0.0) == 0.0


def test_out_of_range_humidity_not_clamped():
    assert compute_absolute_humidity(20.0, 200.0) == pytest.approx(2 * compute_absolute_humidity(20.0, 100.0))


def test_absolute_zero_does_not_raise():
    ah = compute_absolute_humidity(-273.15, 50.0)
    assert not math.isfinite(ah)


def test_singular_exponent_does_not_raise():
    assert compute_absolute_humidity(-243.5, 50.0) == 0.0
    assert compute_absolute_humidity(-243.50000001, 50.0) == math.inf
