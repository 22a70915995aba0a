from __future__ import annotations

import logging
from typing import Any

from .errors import BusUnavailableError

logger = logging.getLogger(__name__)


def open_bus() -> Any:
    """Open the Pi's primary I2C bus (SCL/SDA) via Blinka.

    Raises BusUnavailableError when the platform libraries are missing or the
    bus cannot be opened; the exporter cannot do anything useful without it.
    """
    try:
        import board
        import busio
    except (ImportError, NotImplementedError) as e:
        raise BusUnavailableError(f"I2C platform libraries not available: {e}") from e

    try:
        bus = busio.I2C(board.SCL, board.SDA)
    except Exception as e:
        raise BusUnavailableError(f"Unable to open I2C bus: {e}") from e

    logger.info("I2C bus opened (SCL=%s SDA=%s)", board.SCL, board.SDA)
    return bus
