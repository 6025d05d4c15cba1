from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional


# libsensors feature/subfeature type codes (sensors/sensors.h)
SENSORS_FEATURE_TEMP = 0x02
SENSORS_SUBFEATURE_TEMP_INPUT = SENSORS_FEATURE_TEMP << 8

# Sanity bound on CPU counts handed in by the caller
MAX_CPU_COUNT = 16384

# Order matters: first matching prefix wins
DRIVER_PRIORITIES: tuple[tuple[str, int], ...] = (
    ("coretemp", 0),
    ("via_cputemp", 0),
    ("cpu_thermal", 0),
    ("k10temp", 0),
    ("zenpower", 0),
    # Low priority drivers
    ("acpitz", 1),
)


@dataclass(frozen=True)
class BoundSymbolSet:
    sensors_init: Callable[..., Any]
    sensors_cleanup: Callable[..., Any]
    sensors_get_detected_chips: Callable[..., Any]
    sensors_get_features: Callable[..., Any]
    sensors_get_subfeature: Callable[..., Any]
    sensors_get_value: Callable[..., Any]


# Resolution order for the dynamic binder
REQUIRED_SYMBOLS: tuple[str, ...] = tuple(f.name for f in fields(BoundSymbolSet))


@dataclass(frozen=True)
class ChipName:
    prefix: str
    ref: Any = None


@dataclass(frozen=True)
class Feature:
    name: str
    number: int
    type: int
    ref: Any = None


@dataclass(frozen=True)
class SubFeature:
    name: str
    number: int
    type: int
    ref: Any = None


@dataclass(frozen=True)
class ChipReading:
    chip: ChipName
    feature_number: int
    value: float


@dataclass
class CPUData:
    # None means "unknown"; never read it as 0 °C
    temperature: Optional[float] = None
