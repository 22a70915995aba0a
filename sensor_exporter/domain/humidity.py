from __future__ import annotations

import math


def compute_absolute_humidity(temperature_c: float, relative_humidity: float) -> float:
    """Absolute humidity in g/m^3 from temperature (C) and relative humidity (%).

    Uses Bolton's saturation vapour pressure equation:
    Bolton, D., The computation of equivalent potential temperature,
    Monthly Weather Review, 108, 1046-1053, 1980.

    Inputs are not validated. Degenerate temperatures (-243.5, -273.15) give
    inf/nan rather than raising.
    """
    t = float(temperature_c)
    rh = float(relative_humidity)
    svp = 6.112 * _exp(_ieee_div(17.67 * t, t + 243.5))
    return _ieee_div(svp * rh * 2.1674, 273.15 + t)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _ieee_div(num: float, den: float) -> float:
    if den != 0.0:
        return num / den
    if num == 0.0 or math.isnan(num):
        return math.nan
    return math.copysign(math.inf, num) * math.copysign(1.0, den)
