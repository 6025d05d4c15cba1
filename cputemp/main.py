from __future__ import annotations

import logging
from typing import Optional

from .core.config import Settings, settings
from .core.log import configure_logging

from .domain.errors import LibraryNotFound
from .domain.priority import ChipPrioritizer
from .drivers.libsensors import LibSensorsBinder
from .drivers.thermal_zone import ThermalZoneReader
from .sensors.base import SensorLibrary
from .sensors.dynamic_library import DynamicSensorLibrary
from .sensors.static_library import StaticSensorLibrary
from .services.aggregator import TemperatureAggregator
from .services.lifecycle import SensorLifecycle
from .services.monitor import CPUTemperatureMonitor


logger = logging.getLogger(__name__)


def build_library(cfg: Settings = settings) -> Optional[SensorLibrary]:
    mode = cfg.sensors_mode

    if mode == "none":
        return None

    if mode == "static":
        try:
            return StaticSensorLibrary()
        except LibraryNotFound as e:
            logger.warning("%s; thermal zone fallback only", e)
            return None

    # default to dynamic
    return DynamicSensorLibrary(LibSensorsBinder(candidates=cfg.library_candidates))


def build_monitor(cfg: Settings = settings) -> CPUTemperatureMonitor:
    library = build_library(cfg)
    lifecycle = SensorLifecycle(library) if library is not None else None
    reader = ThermalZoneReader(cfg.thermal_zone_path)
    aggregator = TemperatureAggregator(
        lifecycle=lifecycle,
        prioritizer=ChipPrioritizer(),
        reader=reader,
    )
    return CPUTemperatureMonitor(lifecycle=lifecycle, aggregator=aggregator, reader=reader)


# --- Singleton ---
monitor: Optional[CPUTemperatureMonitor] = None


def get_monitor() -> CPUTemperatureMonitor:
    global monitor
    if monitor is None:
        configure_logging(settings)
        logger.info("Starting %s (mode=%s)", settings.app_name, settings.sensors_mode)
        monitor = build_monitor(settings)
    return monitor
