from __future__ import annotations

import logging
import math
from typing import MutableSequence, Optional

from ..domain.errors import InvalidCPUCount, SensorReadError
from ..domain.models import (
    MAX_CPU_COUNT,
    SENSORS_FEATURE_TEMP,
    SENSORS_SUBFEATURE_TEMP_INPUT,
    ChipName,
    ChipReading,
    CPUData,
)
from ..domain.priority import ChipPrioritizer
from ..drivers.thermal_zone import ThermalZoneReader
from ..sensors.base import SensorLibrary
from .lifecycle import SensorLifecycle

logger = logging.getLogger(__name__)


class TemperatureAggregator:
    """
    Produces one temperature per logical CPU plus the aggregate slot 0.

    Library readings from the best-priority chips win; otherwise the thermal
    zone file is read once and its value is broadcast to every slot.
    """

    def __init__(
        self,
        lifecycle: Optional[SensorLifecycle],
        prioritizer: ChipPrioritizer,
        reader: ThermalZoneReader,
    ) -> None:
        self._lifecycle = lifecycle
        self._prioritizer = prioritizer
        self._reader = reader
        self.last_source: Optional[str] = None

    def refresh(self, cpus: MutableSequence[CPUData], existing_cpus: int, active_cpus: int) -> None:
        if not (0 < existing_cpus < MAX_CPU_COUNT):
            raise InvalidCPUCount(existing_cpus)
        if len(cpus) < existing_cpus + 1:
            raise ValueError(f"need {existing_cpus + 1} CPU records, got {len(cpus)}")

        data: list[Optional[float]] = [None] * (existing_cpus + 1)
        source: Optional[str] = None

        lc = self._lifecycle
        if lc is not None and lc.initialized:
            if self._fill_from_library(lc.library, data, existing_cpus):
                source = "library"

        if source is None:
            temp = self._reader.read_once()
            if temp is not None:
                data = [temp] * (existing_cpus + 1)
                source = "thermal_zone"

        for i in range(existing_cpus + 1):
            cpus[i].temperature = data[i]

        self.last_source = source

    def _chip_readings(self, library: SensorLibrary, chip: ChipName) -> list[ChipReading]:
        out: list[ChipReading] = []
        for feature in library.features(chip):
            if feature.type != SENSORS_FEATURE_TEMP:
                continue
            sub = library.subfeature(chip, feature, SENSORS_SUBFEATURE_TEMP_INPUT)
            if sub is None:
                continue
            try:
                v = library.value(chip, sub.number)
            except SensorReadError as e:
                logger.debug("%s/%s: %s", chip.prefix, feature.name, e)
                continue
            if not math.isfinite(v):
                continue
            out.append(ChipReading(chip=chip, feature_number=feature.number, value=v))
        return out

    def _fill_from_library(self, library: SensorLibrary, data: list[Optional[float]], existing_cpus: int) -> bool:
        package: Optional[float] = None
        core_vals: list[float] = []

        # First temperature input of a chip is its package/zone reading,
        # the rest are per-core. Chips of the same rank (sockets, dies) append
        # their cores in detection order; the hottest package is the aggregate.
        for chip in self._prioritizer.best(library.detected_chips()):
            readings = self._chip_readings(library, chip)
            if not readings:
                continue
            head = readings[0].value
            package = head if package is None else max(package, head)
            core_vals.extend(r.value for r in readings[1:])

        if package is None:
            return False
        aggregate = package

        n = len(core_vals)
        if n == existing_cpus:
            for i, v in enumerate(core_vals):
                data[i + 1] = v
        elif n and n * 2 == existing_cpus:
            # SMT: sibling threads are numbered after all physical cores
            for i, v in enumerate(core_vals):
                data[i + 1] = v
                data[i + 1 + n] = v

        data[0] = aggregate
        for i in range(1, existing_cpus + 1):
            if data[i] is None:
                data[i] = aggregate
        return True
