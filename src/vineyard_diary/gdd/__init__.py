"""Growing Degree Days (GDD / eGDD) for grapevines.

GDD measures accumulated heat above 10 °C over the growing season. The window
runs from April 1 (or an earlier bud-break) to harvest or today.

Public API:
  - models: GDDMethod, StartRule, HeatPoint, AccumulationWindow, stage thresholds
  - compute: classic_base10, effective, correction_factor, daily_heat, cumulative_series
  - milestones: first_day_at_or_above
  - series: resolve_window, daily_series
  - serialization: series_to_dict
"""

from vineyard_diary.gdd.compute import (
    classic_base10,
    correction_factor,
    cumulative_series,
    daily_heat,
    effective,
)
from vineyard_diary.gdd.milestones import first_day_at_or_above, fold_name
from vineyard_diary.gdd.models import (
    BASE_TEMP_C,
    BLOOM_CODE,
    BUDBREAK_CODE,
    HARVEST_CODE,
    AccumulationWindow,
    CumulativeHeatPoint,
    DailyHeatPoint,
    GDDMethod,
    HeatPoint,
    StartRule,
)
from vineyard_diary.gdd.serialization import series_to_dict
from vineyard_diary.gdd.series import daily_series, fixed_start, resolve_window

__all__ = [
    "BASE_TEMP_C",
    "BLOOM_CODE",
    "BUDBREAK_CODE",
    "HARVEST_CODE",
    "AccumulationWindow",
    "CumulativeHeatPoint",
    "DailyHeatPoint",
    "GDDMethod",
    "HeatPoint",
    "StartRule",
    "classic_base10",
    "correction_factor",
    "cumulative_series",
    "daily_heat",
    "daily_series",
    "effective",
    "first_day_at_or_above",
    "fixed_start",
    "fold_name",
    "resolve_window",
    "series_to_dict",
]
