from __future__ import annotations

import logging
import math
import re
from typing import Optional

from ..domain.errors import FallbackReadError, FileOpenFailed, FileParseFailed, FileReadFailed

logger = logging.getLogger(__name__)


DEFAULT_THERMAL_ZONE_PATH = "/sys/devices/virtual/thermal/thermal_zone2/temp"

# Thermal zone files hold one short integer line; same limit as a 16 byte buffer
MAX_LINE = 15

# Leading numeric prefix, strtod style
_NUMBER = re.compile(r"\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_millidegrees(line: str) -> float:
    """Parse a kernel text value in millidegrees and return degrees Celsius.

    Trailing garbage is ignored. Raises ValueError if no number leads the
    line or the number overflows to infinity.
    """
    m = _NUMBER.match(line)
    if not m:
        raise ValueError(f"no numeric prefix in {line!r}")
    value = float(m.group(1)) / 1000.0
    if not math.isfinite(value):
        raise ValueError(f"value out of range in {line!r}")
    return value


def _read(path: str) -> float:
    try:
        f = open(path, "r", encoding="ascii", errors="replace")
    except OSError as e:
        raise FileOpenFailed(path, e.strerror or str(e)) from e

    with f:
        try:
            line = f.readline(MAX_LINE)
        except OSError as e:
            raise FileReadFailed(path, e.strerror or str(e)) from e

    if not line:
        raise FileReadFailed(path, "empty read")

    try:
        return parse_millidegrees(line)
    except ValueError as e:
        raise FileParseFailed(path, str(e)) from e


def read_temperature_file(path: str) -> Optional[float]:
    """Read one temperature from a thermal-zone style file. None if unavailable."""
    try:
        return _read(path)
    except FallbackReadError as e:
        logger.warning("Failed to read temperature (%s): %s", type(e).__name__, e)
        return None


class ThermalZoneReader:
    def __init__(self, path: str = DEFAULT_THERMAL_ZONE_PATH) -> None:
        self.path = path

    def read_once(self, path: Optional[str] = None) -> Optional[float]:
        return read_temperature_file(path or self.path)
