from __future__ import annotations

from typing import Sequence


class CPUTempError(Exception):
    """Base class for recoverable temperature-subsystem errors."""


class BindError(CPUTempError):
    pass


class LibraryNotFound(BindError):
    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(f"No sensors library could be opened (tried {', '.join(self.candidates) or 'nothing'})")


class SymbolResolutionFailed(BindError):
    def __init__(self, symbol: str, library: str = "") -> None:
        self.symbol = symbol
        self.library = library
        where = f" in {library}" if library else ""
        super().__init__(f"Required symbol {symbol!r} missing{where}")


class InitError(CPUTempError):
    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"sensors_init failed with status {status}")


class NotBound(CPUTempError):
    def __init__(self) -> None:
        super().__init__("Sensors library is not bound; cannot reload")


class SensorReadError(CPUTempError):
    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"sensors_get_value failed with status {status}")


class FallbackReadError(CPUTempError):
    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {detail}" if detail else path)


class FileOpenFailed(FallbackReadError):
    pass


class FileReadFailed(FallbackReadError):
    pass


class FileParseFailed(FallbackReadError):
    pass


class InvalidCPUCount(AssertionError):
    """CPU count outside (0, MAX_CPU_COUNT). Programming error, not recoverable."""

    def __init__(self, existing_cpus: int) -> None:
        self.existing_cpus = existing_cpus
        super().__init__(f"existing_cpus={existing_cpus} out of range")
