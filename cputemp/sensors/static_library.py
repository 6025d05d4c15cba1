from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Any, Iterator, Optional

from .base import SensorLibrary
from ..domain.errors import LibraryNotFound, SensorReadError
from ..domain.models import ChipName, Feature, SubFeature
from ..drivers.libsensors import decode

logger = logging.getLogger(__name__)


PYSENSORS_MODULE = "sensors"


def load_pysensors() -> ModuleType:
    # PySensors loads libsensors at import time; a missing library surfaces here
    try:
        return importlib.import_module(PYSENSORS_MODULE)
    except (ImportError, OSError, AttributeError) as e:
        logger.debug("PySensors unavailable: %s", e)
        raise LibraryNotFound([f"{PYSENSORS_MODULE} (PySensors)"]) from e


class StaticSensorLibrary(SensorLibrary):
    """
    In-process binding through the PySensors package.
    The functions exist as soon as the module is imported, so bind() is an
    identity mapping and never fails.
    """

    def __init__(self, module: Optional[ModuleType] = None) -> None:
        self._sensors = module if module is not None else load_pysensors()
        self._error_type: type[BaseException] = getattr(self._sensors, "SensorsError", OSError)

    @property
    def mode(self) -> str:
        return "static"

    @property
    def bound(self) -> bool:
        return True

    def bind(self) -> None:
        return None

    def release(self) -> None:
        return None

    def init(self) -> int:
        try:
            self._sensors.init()
        except self._error_type as e:
            return int(getattr(e, "errno", None) or -1)
        return 0

    def cleanup(self) -> None:
        self._sensors.cleanup()

    def detected_chips(self) -> Iterator[ChipName]:
        for chip in self._sensors.iter_detected_chips():
            yield ChipName(prefix=decode(chip.prefix), ref=chip)

    def features(self, chip: ChipName) -> Iterator[Feature]:
        for f in chip.ref:
            yield Feature(name=decode(f.name), number=int(f.number), type=int(f.type), ref=f)

    def subfeature(self, chip: ChipName, feature: Feature, type: int) -> Optional[SubFeature]:
        sub: Any
        for sub in feature.ref:
            if int(sub.type) == type:
                return SubFeature(name=decode(sub.name), number=int(sub.number), type=int(sub.type), ref=sub)
        return None

    def value(self, chip: ChipName, number: int) -> float:
        try:
            return float(chip.ref.get_value(number))
        except self._error_type as e:
            raise SensorReadError(int(getattr(e, "errno", None) or -1)) from e
