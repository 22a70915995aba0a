from __future__ import annotations


class SensorError(Exception):
    """Base class for sensor failures."""


class SensorActivationError(SensorError):
    """The sensor could not be started. Permanent for the process lifetime."""

    def __init__(self, sensor_id: str, cause: object) -> None:
        super().__init__(f"{sensor_id} activation failed: {cause}")
        self.sensor_id = sensor_id
        self.cause = cause


class SensorReadError(SensorError):
    """A single read failed. Transient, retried on the next cycle."""

    def __init__(self, sensor_id: str, kind: str, cause: object) -> None:
        super().__init__(f"{sensor_id} {kind} read failed: {cause}")
        self.sensor_id = sensor_id
        self.kind = kind
        self.cause = cause


class BusUnavailableError(SensorError):
    """The I2C bus itself cannot be opened. Fatal."""


class SourceReadError(SensorError):
    """One or more reads of a source failed during a single cycle."""

    def __init__(self, sensor_id: str, failures: dict[str, object]) -> None:
        detail = ", ".join(f"{kind}={err}" for kind, err in failures.items())
        super().__init__(f"{sensor_id} read error: {detail}")
        self.sensor_id = sensor_id
        self.failures = failures
