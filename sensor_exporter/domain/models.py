from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional


ReadingKind = Literal["temperature", "humidity", "pressure", "broadband", "infrared"]


@dataclass(frozen=True)
class RawReading:
    sensor_id: str
    kind: ReadingKind
    value: float


@dataclass(frozen=True)
class MetricWrite:
    name: str
    labels: dict[str, str]
    value: float


@dataclass(frozen=True)
class SourceOutcome:
    ts_utc: datetime
    sensor_id: str
    ok: bool
    error: Optional[str] = None
    series_written: int = 0


@dataclass(frozen=True)
class CycleReport:
    cycle: int
    started_utc: datetime
    duration_s: float
    outcomes: tuple[SourceOutcome, ...]

    @property
    def failed(self) -> list[str]:
        return [o.sensor_id for o in self.outcomes if not o.ok]
