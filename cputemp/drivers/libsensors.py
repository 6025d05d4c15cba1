from __future__ import annotations

import ctypes
import logging
import os
from typing import Any, Callable, Optional, Sequence

import _ctypes

from ..domain.errors import LibraryNotFound, SymbolResolutionFailed
from ..domain.models import REQUIRED_SYMBOLS, BoundSymbolSet

logger = logging.getLogger(__name__)


DEFAULT_CANDIDATES: tuple[str, ...] = ("libsensors.so", "libsensors.so.5", "libsensors.so.4")


# --- sensors/sensors.h layouts ---

class SensorsBusId(ctypes.Structure):
    _fields_ = [("type", ctypes.c_short), ("nr", ctypes.c_short)]


class SensorsChipName(ctypes.Structure):
    _fields_ = [
        ("prefix", ctypes.c_char_p),
        ("bus", SensorsBusId),
        ("addr", ctypes.c_int),
        ("path", ctypes.c_char_p),
    ]


class SensorsFeature(ctypes.Structure):
    _fields_ = [
        ("name", ctypes.c_char_p),
        ("number", ctypes.c_int),
        ("type", ctypes.c_int),
        ("first_subfeature", ctypes.c_int),
        ("padding1", ctypes.c_int),
    ]


class SensorsSubfeature(ctypes.Structure):
    _fields_ = [
        ("name", ctypes.c_char_p),
        ("number", ctypes.c_int),
        ("type", ctypes.c_int),
        ("mapping", ctypes.c_int),
        ("flags", ctypes.c_uint),
    ]


ChipPtr = ctypes.POINTER(SensorsChipName)
FeaturePtr = ctypes.POINTER(SensorsFeature)
SubfeaturePtr = ctypes.POINTER(SensorsSubfeature)

# symbol -> (restype, argtypes)
SIGNATURES: dict[str, tuple[Any, list[Any]]] = {
    "sensors_init": (ctypes.c_int, [ctypes.c_void_p]),
    "sensors_cleanup": (None, []),
    "sensors_get_detected_chips": (ChipPtr, [ChipPtr, ctypes.POINTER(ctypes.c_int)]),
    "sensors_get_features": (FeaturePtr, [ChipPtr, ctypes.POINTER(ctypes.c_int)]),
    "sensors_get_subfeature": (SubfeaturePtr, [ChipPtr, FeaturePtr, ctypes.c_int]),
    "sensors_get_value": (ctypes.c_int, [ChipPtr, ctypes.c_int, ctypes.POINTER(ctypes.c_double)]),
}


def _default_loader(name: str) -> Any:
    return ctypes.CDLL(name, mode=os.RTLD_LAZY)


def _default_closer(handle: Any) -> None:
    dlclose = getattr(_ctypes, "dlclose", None)
    raw = getattr(handle, "_handle", None)
    if dlclose is not None and raw:
        dlclose(raw)


class LibSensorsBinder:
    """
    Opens libsensors at runtime and resolves the entry points we call.
    Responsible for: candidate search, all-or-nothing symbol resolution,
    releasing the handle.

    State lives on the instance; one binder is owned by one lifecycle.
    """

    def __init__(
        self,
        candidates: Optional[Sequence[str]] = None,
        loader: Callable[[str], Any] = _default_loader,
        closer: Callable[[Any], None] = _default_closer,
    ) -> None:
        self.candidates = tuple(candidates) if candidates else DEFAULT_CANDIDATES
        self._loader = loader
        self._closer = closer
        self._handle: Any = None
        self._library_name: Optional[str] = None
        self._symbols: Optional[BoundSymbolSet] = None

    @property
    def bound(self) -> bool:
        return self._handle is not None and self._symbols is not None

    @property
    def library_name(self) -> Optional[str]:
        return self._library_name

    @property
    def symbols(self) -> Optional[BoundSymbolSet]:
        return self._symbols

    def bind(self) -> BoundSymbolSet:
        if self.bound:
            assert self._symbols is not None
            return self._symbols

        self._open()

        resolved: dict[str, Any] = {}
        for name in REQUIRED_SYMBOLS:
            try:
                fn = getattr(self._handle, name)
            except AttributeError:
                lib = self._library_name or ""
                self.release()
                raise SymbolResolutionFailed(name, lib) from None
            restype, argtypes = SIGNATURES[name]
            fn.restype = restype
            fn.argtypes = argtypes
            resolved[name] = fn

        self._symbols = BoundSymbolSet(**resolved)
        logger.info("Bound %d symbols from %s", len(resolved), self._library_name)
        return self._symbols

    def release(self) -> None:
        handle = self._handle
        self._handle = None
        self._symbols = None
        self._library_name = None
        if handle is not None:
            self._closer(handle)
            logger.debug("Released sensors library handle")

    def _open(self) -> None:
        for name in self.candidates:
            try:
                self._handle = self._loader(name)
            except OSError as e:
                logger.debug("Cannot open %s: %s", name, e)
                continue
            self._library_name = name
            logger.debug("Opened %s", name)
            return
        raise LibraryNotFound(self.candidates)


def decode(raw: Optional[bytes]) -> str:
    if raw is None:
        return ""
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return str(raw)
