from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .core.config import settings
from .core.log import configure_logging

from .api.routes import metrics_router, router as api_router
import sensor_exporter.api.routes as routes_module

from .metrics.registry import MetricsRegistry
from .sensors.base import SourceSlot, present_sources
from .sensors.errors import BusUnavailableError
from .sensors.factory import build_slots
from .services.poller import PollingService
from .services.scheduler import IntervalTicker


logger = logging.getLogger(__name__)


# --- Singletons ---
registry = MetricsRegistry(with_process_metrics=True)
slots: list[SourceSlot] = []
poller: PollingService | None = None


def get_poller() -> PollingService:
    assert poller is not None
    return poller


def get_registry() -> MetricsRegistry:
    return registry


def get_slots() -> list[SourceSlot]:
    return slots


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Starting %s (mode=%s)", settings.app_name, settings.sensor_mode)

    global poller
    try:
        slots[:] = build_slots(settings)
    except BusUnavailableError as e:
        logger.critical("I2C bus unavailable: %s", e)
        raise

    poller = PollingService(
        sources=present_sources(slots),
        registry=registry,
        ticker=IntervalTicker(settings.poll_interval_seconds),
        mode=settings.sensor_mode,
        interval_s=settings.poll_interval_seconds,
    )
    await poller.start()

    try:
        yield
    finally:
        if poller:
            await poller.stop()

        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# Make the dependency functions in routes resolve to the real ones
app.dependency_overrides[routes_module.get_poller] = get_poller
app.dependency_overrides[routes_module.get_registry] = get_registry
app.dependency_overrides[routes_module.get_slots] = get_slots

app.include_router(metrics_router)
app.include_router(api_router, prefix="/api")


def run() -> None:
    configure_logging()
    logger.info("%s listening on %s:%s", settings.app_name, settings.host, settings.port)
    uvicorn.run("sensor_exporter.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
