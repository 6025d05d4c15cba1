from __future__ import annotations

import logging
from typing import MutableSequence, Optional

from ..domain.errors import BindError, InitError, NotBound
from ..domain.models import CPUData
from ..drivers.thermal_zone import ThermalZoneReader
from .aggregator import TemperatureAggregator
from .lifecycle import SensorLifecycle

logger = logging.getLogger(__name__)


class CPUTemperatureMonitor:
    """Entry points for the host's monitoring loop: initialize, refresh, reload, cleanup.

    A missing or broken sensors library is never fatal here; refresh() keeps
    serving thermal-zone readings (or "unknown").
    """

    def __init__(
        self,
        lifecycle: Optional[SensorLifecycle],
        aggregator: TemperatureAggregator,
        reader: ThermalZoneReader,
    ) -> None:
        self._lifecycle = lifecycle
        self._aggregator = aggregator
        self._reader = reader

    @property
    def lifecycle(self) -> Optional[SensorLifecycle]:
        return self._lifecycle

    def initialize(self) -> bool:
        if self._lifecycle is None:
            logger.info("No sensors library configured; using %s", self._reader.path)
            return False
        try:
            self._lifecycle.initialize()
        except (BindError, InitError) as e:
            logger.warning("Falling back to thermal zone %s: %s", self._reader.path, e)
            return False
        return True

    def cleanup(self) -> None:
        if self._lifecycle is not None:
            self._lifecycle.cleanup()

    def reload(self) -> bool:
        if self._lifecycle is None:
            return False
        try:
            self._lifecycle.reload()
        except (NotBound, InitError) as e:
            logger.warning("Sensors reload failed: %s", e)
            return False
        return True

    def refresh(self, cpus: MutableSequence[CPUData], existing_cpus: int, active_cpus: int) -> None:
        self._aggregator.refresh(cpus, existing_cpus, active_cpus)

    def snapshot(self) -> dict:
        lc = self._lifecycle
        return {
            "mode": lc.library.mode if lc else "none",
            "library_bound": bool(lc and lc.bound),
            "initialized": bool(lc and lc.initialized),
            "thermal_zone_path": self._reader.path,
            "last_source": self._aggregator.last_source,
        }

    def __enter__(self) -> "CPUTemperatureMonitor":
        self.initialize()
        return self

    def __exit__(self, *exc) -> None:
        self.cleanup()
