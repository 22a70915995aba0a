from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..core.timeutil import now_utc
from ..domain.humidity import compute_absolute_humidity
from ..domain.interfaces import MetricsSink, Ticker
from ..domain.models import CycleReport, MetricWrite, RawReading, SourceOutcome
from ..metrics import registry as m
from ..sensors.base import ClimateSource, LightSource, SensorSource
from ..sensors.errors import SensorReadError, SourceReadError


logger = logging.getLogger(__name__)


@dataclass
class LiveState:
    mode: str = "sim"
    interval_s: float = 5.0
    running: bool = False
    cycles: int = 0
    last_cycle_started: Optional[datetime] = None
    last_cycle_duration_s: Optional[float] = None
    sources: dict[str, SourceOutcome] = field(default_factory=dict)


def read_source(source: SensorSource) -> list[RawReading]:
    """Issue every read the source needs for its metrics.

    Blocking (bus I/O). Each read is attempted even if an earlier one failed
    so the log line names every failing channel; any failure raises
    SourceReadError and nothing is returned.
    """
    sid = source.sensor_id

    if isinstance(source, ClimateSource):
        kinds = ["temperature", "pressure", "humidity"] if source.has_pressure else ["temperature", "humidity"]
        values: dict[str, float] = {}
        failures: dict[str, object] = {}
        for kind in kinds:
            try:
                values[kind] = getattr(source, f"read_{kind}")()
            except SensorReadError as e:
                failures[kind] = e.cause
            except Exception as e:
                failures[kind] = e
        if failures:
            raise SourceReadError(sid, failures)
        return [RawReading(sid, kind, float(values[kind])) for kind in kinds]

    if isinstance(source, LightSource):
        try:
            broadband, infrared = source.read_luminosity()
        except SensorReadError as e:
            raise SourceReadError(sid, {"luminosity": e.cause}) from e
        except Exception as e:
            raise SourceReadError(sid, {"luminosity": e}) from e
        return [RawReading(sid, "broadband", float(broadband)), RawReading(sid, "infrared", float(infrared))]

    raise TypeError(f"Unsupported source type: {type(source).__name__}")


def build_writes(source: SensorSource, readings: Sequence[RawReading]) -> list[MetricWrite]:
    """Map one source's raw readings (same cycle) to its series, derived ones included."""
    labels = {"device": source.sensor_id, "location": source.location}
    by_kind = {r.kind: r.value for r in readings}
    writes: list[MetricWrite] = []

    if "temperature" in by_kind:
        writes.append(MetricWrite(m.TEMPERATURE, labels, by_kind["temperature"]))
    if "pressure" in by_kind:
        writes.append(MetricWrite(m.PRESSURE, labels, by_kind["pressure"] / 100.0))  # Pa -> hPa
    if "humidity" in by_kind:
        writes.append(MetricWrite(m.HUMIDITY, labels, by_kind["humidity"]))
    if "temperature" in by_kind and "humidity" in by_kind:
        ah = compute_absolute_humidity(by_kind["temperature"], by_kind["humidity"])
        writes.append(MetricWrite(m.ABSOLUTE_HUMIDITY, labels, ah))

    if isinstance(source, LightSource) and "broadband" in by_kind and "infrared" in by_kind:
        bb, ir = int(by_kind["broadband"]), int(by_kind["infrared"])
        writes.append(MetricWrite(m.ILLUMINANCE, labels, float(source.compute_illuminance(bb, ir))))
        writes.append(MetricWrite(m.LIGHT_RAW, {**labels, "type": "broadband"}, float(bb)))
        writes.append(MetricWrite(m.LIGHT_RAW, {**labels, "type": "infrared"}, float(ir)))

    return writes


class PollingService:
    """Background read -> derive -> publish loop over the present sources.

    Sources are polled one after another; a failure in one never stops the
    others. The first cycle runs as soon as the service starts.
    """

    def __init__(
        self,
        sources: Sequence[SensorSource],
        registry: MetricsSink,
        ticker: Ticker,
        mode: str = "sim",
        interval_s: float = 5.0,
    ) -> None:
        self._sources = list(sources)
        self._registry = registry
        self._ticker = ticker

        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

        self.live = LiveState(mode=mode, interval_s=interval_s)

    @property
    def sources(self) -> list[SensorSource]:
        return list(self._sources)

    async def start(self) -> None:
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name="poller_loop")

    async def stop(self) -> None:
        self._stop.set()
        if self._task:
            await self._task
            self._task = None

    async def _run(self) -> None:
        logger.info(
            "Poller loop started (interval_s=%s sources=%s)",
            self.live.interval_s,
            [s.sensor_id for s in self._sources],
        )
        self.live.running = True
        try:
            while await self._next_tick():
                await self.run_cycle()
        finally:
            self.live.running = False
            logger.info("Poller loop stopped")

    async def _next_tick(self) -> bool:
        """Wait for the ticker; False once stop() was requested."""
        if self._stop.is_set():
            return False
        tick = asyncio.ensure_future(self._ticker.wait())
        stop = asyncio.ensure_future(self._stop.wait())
        done, pending = await asyncio.wait({tick, stop}, return_when=asyncio.FIRST_COMPLETED)
        for fut in pending:
            fut.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if tick in done:
            # re-raise ticker errors
            tick.result()
        return not self._stop.is_set()

    async def run_cycle(self) -> CycleReport:
        """One full pass over all present sources. Always runs to completion."""
        loop = asyncio.get_running_loop()
        self.live.cycles += 1
        cycle = self.live.cycles
        started = now_utc()
        t0 = loop.time()
        self.live.last_cycle_started = started

        outcomes = []
        for source in self._sources:
            outcome = await self._poll_source(source)
            self.live.sources[source.sensor_id] = outcome
            outcomes.append(outcome)

        duration = loop.time() - t0
        self.live.last_cycle_duration_s = duration
        if duration > self.live.interval_s:
            logger.warning("Cycle %d took %.2fs (interval %.2fs)", cycle, duration, self.live.interval_s)

        report = CycleReport(cycle=cycle, started_utc=started, duration_s=duration, outcomes=tuple(outcomes))
        logger.debug("Cycle %d done in %.3fs (failed=%s)", cycle, duration, report.failed)
        return report

    async def _poll_source(self, source: SensorSource) -> SourceOutcome:
        sid = source.sensor_id
        loop = asyncio.get_running_loop()

        try:
            # Blocking bus reads run in a worker thread so /metrics stays responsive
            readings = await loop.run_in_executor(None, read_source, source)
            writes = build_writes(source, readings)
        except SourceReadError as e:
            logger.warning("%s", e)
            return SourceOutcome(ts_utc=now_utc(), sensor_id=sid, ok=False, error=str(e))
        except Exception as e:
            logger.exception("%s poll failed: %s", sid, e)
            return SourceOutcome(ts_utc=now_utc(), sensor_id=sid, ok=False, error=str(e))

        # Everything is computed before the first write
        try:
            for w in writes:
                self._registry.set_value(w.name, w.labels, w.value)
        except Exception as e:
            logger.exception("%s metrics write failed: %s", sid, e)
            return SourceOutcome(ts_utc=now_utc(), sensor_id=sid, ok=False, error=str(e))

        logger.debug("%s published %d series", sid, len(writes))
        return SourceOutcome(ts_utc=now_utc(), sensor_id=sid, ok=True, series_written=len(writes))
