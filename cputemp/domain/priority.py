from __future__ import annotations
from typing import Iterable, Optional

from .models import DRIVER_PRIORITIES, ChipName


class ChipPrioritizer:
    """Decides which hardware-monitor chips carry the CPU package temperature.

    Lower priority values are more trustworthy. Chips whose prefix is not in
    the table are not CPU temperature sources at all.
    """

    def __init__(self, table: Iterable[tuple[str, int]] = DRIVER_PRIORITIES) -> None:
        self._table = tuple(table)

    def priority_of(self, chip: ChipName) -> Optional[int]:
        for prefix, priority in self._table:
            if chip.prefix == prefix:
                return priority
        return None

    def best(self, chips: Iterable[ChipName]) -> list[ChipName]:
        """Chips sharing the lowest priority value, in detection order."""
        winners: list[ChipName] = []
        top: Optional[int] = None
        for chip in chips:
            prio = self.priority_of(chip)
            if prio is None:
                continue
            if top is None or prio < top:
                top = prio
                winners = [chip]
            elif prio == top:
                winners.append(chip)
        return winners
