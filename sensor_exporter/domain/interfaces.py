from __future__ import annotations
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class MetricsSink(Protocol):
    def set_value(self, metric_name: str, labels: Mapping[str, str], value: float) -> None:
        ...


@runtime_checkable
class Ticker(Protocol):
    async def wait(self) -> None:
        """Return when the next cycle is due."""
        ...
