"""
Shared fakes for the sensors tests. Nothing here needs a real libsensors.
"""

import ctypes
from types import SimpleNamespace
from typing import Iterator, Optional

import pytest

from cputemp.domain.errors import SensorReadError
from cputemp.domain.models import (
    SENSORS_FEATURE_TEMP,
    SENSORS_SUBFEATURE_TEMP_INPUT,
    ChipName,
    CPUData,
    Feature,
    SubFeature,
)
from cputemp.drivers.libsensors import (
    SensorsChipName,
    SensorsFeature,
    SensorsSubfeature,
)
from cputemp.sensors.base import SensorLibrary

VOLTAGE = 0x00

# chip prefix -> [(feature name, feature type, value)]
CORETEMP_4 = {
    "coretemp": [
        ("temp1", SENSORS_FEATURE_TEMP, 61.0),
        ("temp2", SENSORS_FEATURE_TEMP, 55.0),
        ("temp3", SENSORS_FEATURE_TEMP, 56.0),
        ("temp4", SENSORS_FEATURE_TEMP, 57.0),
        ("temp5", SENSORS_FEATURE_TEMP, 58.0),
    ],
}


class FakeCDLL:
    """Stand-in for ctypes.CDLL('libsensors.so'), speaking real ctypes structures."""

    def __init__(self, chips=None, missing=(), init_status=0):
        self.chips = dict(chips or {})
        self.init_status = init_status
        self.init_calls = 0
        self.cleanup_calls = 0

        def sensors_init(config_file):
            assert config_file is None
            self.init_calls += 1
            return self.init_status

        def sensors_cleanup():
            self.cleanup_calls += 1

        def sensors_get_detected_chips(match, nr_ref):
            cursor = nr_ref._obj
            names = list(self.chips)
            if cursor.value >= len(names):
                return None
            prefix = names[cursor.value]
            cursor.value += 1
            return ctypes.pointer(SensorsChipName(prefix=prefix.encode()))

        def sensors_get_features(chip_ref, nr_ref):
            cursor = nr_ref._obj
            feats = self.chips[chip_ref.contents.prefix.decode()]
            if cursor.value >= len(feats):
                return None
            i = cursor.value
            cursor.value += 1
            name, ftype, _ = feats[i]
            return ctypes.pointer(SensorsFeature(name=name.encode(), number=i, type=ftype))

        def sensors_get_subfeature(chip_ref, feat_ref, subtype):
            f = feat_ref.contents
            if subtype != (f.type << 8):
                return None
            return ctypes.pointer(
                SensorsSubfeature(name=f.name + b"_input", number=f.number, type=subtype)
            )

        def sensors_get_value(chip_ref, number, out_ref):
            feats = self.chips[chip_ref.contents.prefix.decode()]
            value = feats[number][2]
            if value is None:
                return -1
            out_ref._obj.value = value
            return 0

        for fn in (
            sensors_init,
            sensors_cleanup,
            sensors_get_detected_chips,
            sensors_get_features,
            sensors_get_subfeature,
            sensors_get_value,
        ):
            if fn.__name__ not in missing:
                setattr(self, fn.__name__, fn)


class FakeLoader:
    """Replaces ctypes.CDLL and dlclose; counts opens and closes."""

    def __init__(self, available=None):
        self.available = dict(available or {})
        self.attempts: list[str] = []
        self.opened: list[str] = []
        self.closed: list[object] = []

    def __call__(self, name):
        self.attempts.append(name)
        if name not in self.available:
            raise OSError(f"{name}: cannot open shared object file: No such file or directory")
        self.opened.append(name)
        return self.available[name]

    def close(self, handle):
        self.closed.append(handle)

    @property
    def open_handles(self) -> int:
        return len(self.opened) - len(self.closed)


class ScriptedLibrary(SensorLibrary):
    """SensorLibrary driven by plain data, for aggregator tests.

    `chips` maps prefix -> features, or is a list of (prefix, features) pairs
    when several chips share a prefix (multi-socket).
    """

    def __init__(self, chips=None, mode="dynamic"):
        if isinstance(chips, dict):
            chips = chips.items()
        self.chips = list(chips or ())
        self._mode = mode
        self._bound = False
        self.init_calls = 0
        self.cleanup_calls = 0

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def bound(self) -> bool:
        return self._bound

    def bind(self) -> None:
        self._bound = True

    def release(self) -> None:
        self._bound = False

    def init(self) -> int:
        self.init_calls += 1
        return 0

    def cleanup(self) -> None:
        self.cleanup_calls += 1

    def detected_chips(self) -> Iterator[ChipName]:
        for i, (prefix, _) in enumerate(self.chips):
            yield ChipName(prefix=prefix, ref=i)

    def features(self, chip: ChipName) -> Iterator[Feature]:
        for i, (name, ftype, _) in enumerate(self.chips[chip.ref][1]):
            yield Feature(name=name, number=i, type=ftype)

    def subfeature(self, chip: ChipName, feature: Feature, type: int) -> Optional[SubFeature]:
        if type != SENSORS_SUBFEATURE_TEMP_INPUT or feature.type != SENSORS_FEATURE_TEMP:
            return None
        return SubFeature(name=f"{feature.name}_input", number=feature.number, type=type)

    def value(self, chip: ChipName, number: int) -> float:
        v = self.chips[chip.ref][1][number][2]
        if v is None:
            raise SensorReadError(-1)
        return v


class FakeSensorsError(Exception):
    def __init__(self, errno, message=""):
        super().__init__(message)
        self.errno = errno


def make_pysensors(chips=None, init_error=None):
    """Minimal module shaped like PySensors (`import sensors`)."""
    chips = dict(chips or {})
    calls = {"init": 0, "cleanup": 0}

    class Subfeature(SimpleNamespace):
        pass

    class Feat:
        def __init__(self, name, number, ftype):
            self.name = name.encode()
            self.number = number
            self.type = ftype

        def __iter__(self):
            if self.type == SENSORS_FEATURE_TEMP:
                yield Subfeature(name=self.name + b"_crit", number=100 + self.number, type=SENSORS_SUBFEATURE_TEMP_INPUT + 4)
                yield Subfeature(name=self.name + b"_input", number=self.number, type=SENSORS_SUBFEATURE_TEMP_INPUT)

    class Chip:
        def __init__(self, prefix):
            self.prefix = prefix.encode()

        def __iter__(self):
            for i, (name, ftype, _) in enumerate(chips[self.prefix.decode()]):
                yield Feat(name, i, ftype)

        def get_value(self, number):
            v = chips[self.prefix.decode()][number][2]
            if v is None:
                raise FakeSensorsError(5, "Kernel interface error")
            return v

    def init():
        calls["init"] += 1
        if init_error is not None:
            raise FakeSensorsError(init_error, "Can't read config")

    def cleanup():
        calls["cleanup"] += 1

    def iter_detected_chips(chip_name="*-*"):
        for prefix in chips:
            yield Chip(prefix)

    return SimpleNamespace(
        init=init,
        cleanup=cleanup,
        iter_detected_chips=iter_detected_chips,
        SensorsError=FakeSensorsError,
        calls=calls,
    )


@pytest.fixture
def cpus():
    def _make(existing: int, fill: Optional[float] = None) -> list[CPUData]:
        return [CPUData(temperature=fill) for _ in range(existing + 1)]
    return _make


@pytest.fixture
def zone_file(tmp_path):
    def _write(content: str, name: str = "temp"):
        p = tmp_path / name
        p.write_text(content)
        return str(p)
    return _write


@pytest.fixture
def missing_path(tmp_path):
    return str(tmp_path / "thermal_zone2" / "temp")
