from __future__ import annotations

import ctypes
import logging
from typing import Iterator, Optional

from .base import SensorLibrary
from ..domain.errors import SensorReadError
from ..domain.models import BoundSymbolSet, ChipName, Feature, SubFeature
from ..drivers.libsensors import LibSensorsBinder, decode

logger = logging.getLogger(__name__)


class DynamicSensorLibrary(SensorLibrary):
    def __init__(self, binder: LibSensorsBinder) -> None:
        self._binder = binder

    @property
    def mode(self) -> str:
        return "dynamic"

    @property
    def bound(self) -> bool:
        return self._binder.bound

    @property
    def library_name(self) -> Optional[str]:
        return self._binder.library_name

    def bind(self) -> None:
        self._binder.bind()

    def release(self) -> None:
        self._binder.release()

    def _syms(self) -> BoundSymbolSet:
        syms = self._binder.symbols
        if syms is None:
            raise RuntimeError("Sensors library used before bind()")
        return syms

    def init(self) -> int:
        # NULL config file: compiled-in defaults
        return int(self._syms().sensors_init(None))

    def cleanup(self) -> None:
        self._syms().sensors_cleanup()

    def detected_chips(self) -> Iterator[ChipName]:
        get_chips = self._syms().sensors_get_detected_chips
        nr = ctypes.c_int(0)
        while True:
            ptr = get_chips(None, ctypes.byref(nr))
            if not ptr:
                return
            yield ChipName(prefix=decode(ptr.contents.prefix), ref=ptr)

    def features(self, chip: ChipName) -> Iterator[Feature]:
        get_features = self._syms().sensors_get_features
        nr = ctypes.c_int(0)
        while True:
            ptr = get_features(chip.ref, ctypes.byref(nr))
            if not ptr:
                return
            f = ptr.contents
            yield Feature(name=decode(f.name), number=int(f.number), type=int(f.type), ref=ptr)

    def subfeature(self, chip: ChipName, feature: Feature, type: int) -> Optional[SubFeature]:
        ptr = self._syms().sensors_get_subfeature(chip.ref, feature.ref, type)
        if not ptr:
            return None
        s = ptr.contents
        return SubFeature(name=decode(s.name), number=int(s.number), type=int(s.type), ref=ptr)

    def value(self, chip: ChipName, number: int) -> float:
        out = ctypes.c_double(0.0)
        status = self._syms().sensors_get_value(chip.ref, number, ctypes.byref(out))
        if status != 0:
            raise SensorReadError(int(status))
        return float(out.value)
