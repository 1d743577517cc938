"""GDD data models and constants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

# Base temperature for grapevine degree days
BASE_TEMP_C = 10.0

# Fixed start of the accumulation window (April 1)
FIXED_START_MONTH = 4
FIXED_START_DAY = 1

# Stage-code thresholds for the milestones that bound the window
BUDBREAK_CODE = 5
BLOOM_CODE = 23
HARVEST_CODE = 40

# eGDD correction: linear attenuation from 30 °C, quadratic penalty above 35 °C
EGDD_LINEAR_START_C = 30.0
EGDD_QUAD_START_C = 35.0
EGDD_LINEAR_SLOPE = 0.04
EGDD_QUAD_K = 0.02


class GDDMethod(StrEnum):
    """Day-level heat accumulation model."""

    CLASSIC_BASE10 = "classic-base-10"
    EFFECTIVE = "effective"


class StartRule(StrEnum):
    """How the first day of the accumulation window is chosen."""

    FIXED = "fixed"
    BUDBREAK_OR_FIXED = "budbreak-or-fixed"


@dataclass(frozen=True)
class HeatPoint:
    """One point of a daily or cumulative heat series."""

    day: date
    value: float


DailyHeatPoint = HeatPoint
CumulativeHeatPoint = HeatPoint


@dataclass(frozen=True)
class AccumulationWindow:
    """Inclusive day range over which heat is accumulated.

    A window whose ``end`` precedes ``start`` is empty.
    """

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def days(self, stride: int = 1) -> Iterator[date]:
        """Days from ``start`` to ``end`` inclusive, every ``stride`` days.

        Raises:
            ValueError: If ``stride`` is not positive.
        """
        if stride < 1:
            msg = f"stride must be positive, got {stride}"
            raise ValueError(msg)
        for offset in range(0, len(self), stride):
            yield self.start + timedelta(days=offset)
