from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .base import LightSource
from .errors import SensorActivationError, SensorReadError

logger = logging.getLogger(__name__)


# Datasheet fixed-point constants (TAOS TSL2560/2561, T/FN/CL package)
LUX_SCALE = 14
RATIO_SCALE = 9
CH_SCALE = 10
CHSCALE_TINT0 = 0x7517  # 322/11 * 2^CH_SCALE
CHSCALE_TINT1 = 0x0FE7  # 322/81 * 2^CH_SCALE

# (ratio upper bound K, B coefficient, M coefficient)
_LUX_TABLE = (
    (0x0040, 0x01F2, 0x01BE),
    (0x0080, 0x0214, 0x02D1),
    (0x00C0, 0x023F, 0x037B),
    (0x0100, 0x0270, 0x03FE),
    (0x0138, 0x016F, 0x01FC),
    (0x019A, 0x00D2, 0x00FB),
    (0x029A, 0x0018, 0x0012),
)

INTEGRATION_MS = {0: 13.7, 1: 101.0, 2: 402.0}

# Channel counts above these mean the ADC saturated for that integration time
CLIP_THRESHOLD = {0: 4900, 1: 37000, 2: 65000}
LUX_OVERFLOW = 65536


@dataclass(frozen=True)
class TSL2561Timing:
    gain_16x: bool = True
    integration: int = 2  # 0=13.7ms 1=101ms 2=402ms


def calculate_lux(broadband: int, infrared: int, timing: TSL2561Timing = TSL2561Timing()) -> int:
    """Integer lux approximation from the two ADC channels.

    Follows the datasheet reference algorithm: scale both channels to the
    nominal 402 ms / 16x setting, pick the piecewise-linear segment from the
    IR/broadband ratio, then round.
    A saturated channel yields LUX_OVERFLOW instead of a computed value.
    """
    clip = CLIP_THRESHOLD.get(timing.integration, CLIP_THRESHOLD[2])
    if broadband > clip or infrared > clip:
        return LUX_OVERFLOW

    if timing.integration == 0:
        ch_scale = CHSCALE_TINT0
    elif timing.integration == 1:
        ch_scale = CHSCALE_TINT1
    else:
        ch_scale = 1 << CH_SCALE

    if not timing.gain_16x:
        ch_scale <<= 4

    channel0 = (int(broadband) * ch_scale) >> CH_SCALE
    channel1 = (int(infrared) * ch_scale) >> CH_SCALE

    ratio1 = 0
    if channel0 != 0:
        ratio1 = (channel1 << (RATIO_SCALE + 1)) // channel0
    ratio = (ratio1 + 1) >> 1

    b, m = 0, 0
    for k, kb, km in _LUX_TABLE:
        if ratio <= k:
            b, m = kb, km
            break

    temp = channel0 * b - channel1 * m
    if temp < 0:
        temp = 0
    temp += 1 << (LUX_SCALE - 1)
    return temp >> LUX_SCALE


class TSL2561Source(LightSource):
    """TAOS TSL2561 light-to-digital converter on I2C."""

    def __init__(
        self,
        bus: Any,
        address: int = 0x29,
        timing: TSL2561Timing = TSL2561Timing(),
        sensor_id: str = "tsl2561",
        location: str = "indoor",
    ) -> None:
        super().__init__(sensor_id, location)
        self._bus = bus
        self._address = address
        self._timing = timing
        self._dev: Any = None

    def activate(self) -> None:
        try:
            import adafruit_tsl2561

            dev = adafruit_tsl2561.TSL2561(self._bus, address=self._address)
            dev.enabled = True
            dev.gain = 1 if self._timing.gain_16x else 0
            dev.integration_time = self._timing.integration
            self._dev = dev
        except Exception as e:
            raise SensorActivationError(self.sensor_id, e) from e
        logger.info(
            "TSL2561 configured: gain=%s integration=%sms",
            "16x" if self._timing.gain_16x else "1x",
            INTEGRATION_MS[self._timing.integration],
        )

    def read_luminosity(self) -> tuple[int, int]:
        try:
            broadband, infrared = self._dev.luminosity
        except Exception as e:
            raise SensorReadError(self.sensor_id, "luminosity", e) from e
        return int(broadband), int(infrared)

    def compute_illuminance(self, broadband: int, infrared: int) -> float:
        return float(calculate_lux(broadband, infrared, self._timing))
