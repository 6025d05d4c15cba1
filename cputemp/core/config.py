from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SENSORS_MODES = ("dynamic", "static", "none")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CPUTEMP_", env_file=".env", extra="ignore")

    app_name: str = "CPU Temperature Sensors"

    # Library binding: "dynamic" (ctypes), "static" (PySensors) or "none"
    sensors_mode: str = "dynamic"

    # Unversioned name first; Debian ships .so.5 and Fedora .so.4 without
    # the symlink unless the -dev package is installed
    library_candidates: list[str] = Field(
        default_factory=lambda: ["libsensors.so", "libsensors.so.5", "libsensors.so.4"]
    )

    # Fallback thermal zone (millidegrees Celsius)
    thermal_zone_path: str = "/sys/devices/virtual/thermal/thermal_zone2/temp"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_max_bytes: int = 2_000_000
    log_backup_count: int = 5

    @field_validator("sensors_mode")
    @classmethod
    def _check_mode(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SENSORS_MODES:
            raise ValueError(f"sensors_mode must be one of {SENSORS_MODES}, got {v!r}")
        return v


settings = Settings()
