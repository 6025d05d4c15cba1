from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from ..domain.models import ChipName, Feature, SubFeature


class SensorLibrary(ABC):
    """Capability interface over libsensors, however it was bound."""

    @property
    @abstractmethod
    def mode(self) -> str:
        ...

    @property
    @abstractmethod
    def bound(self) -> bool:
        ...

    @abstractmethod
    def bind(self) -> None:
        """Make the entry points callable. Raise BindError on failure."""
        ...

    @abstractmethod
    def release(self) -> None:
        ...

    @abstractmethod
    def init(self) -> int:
        """Load the default configuration. Returns the library status (0 = ok)."""
        ...

    @abstractmethod
    def cleanup(self) -> None:
        ...

    @abstractmethod
    def detected_chips(self) -> Iterator[ChipName]:
        ...

    @abstractmethod
    def features(self, chip: ChipName) -> Iterator[Feature]:
        ...

    @abstractmethod
    def subfeature(self, chip: ChipName, feature: Feature, type: int) -> Optional[SubFeature]:
        ...

    @abstractmethod
    def value(self, chip: ChipName, number: int) -> float:
        """Raise SensorReadError on a non-zero library status."""
        ...
