"""Pure GDD computation functions (no I/O).

Both models share the base-10 degree-day core::

    core = max(0, (T_max + T_min) / 2 - 10)

``classic-base-10`` returns ``core`` unchanged. ``effective`` (eGDD) scales it
by a correction factor ``m`` driven by ``T_max`` only::

    T_max <= 30        m = 1
    30 < T_max <= 35   m = 1 - 0.04 * (T_max - 30)
    T_max > 35         m = 0.8 - 0.02 * (T_max - 35) ** 2

with ``m`` clamped to [0, 1]. ``m`` is continuous at both breakpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from vineyard_diary.gdd.models import (
    BASE_TEMP_C,
    EGDD_LINEAR_SLOPE,
    EGDD_LINEAR_START_C,
    EGDD_QUAD_K,
    EGDD_QUAD_START_C,
    GDDMethod,
    HeatPoint,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


def classic_base10(tmin_c: float, tmax_c: float) -> float:
    """Compute classic GDD for a single day.

    Args:
        tmin_c: Daily minimum temperature in Celsius.
        tmax_c: Daily maximum temperature in Celsius.

    Returns:
        Degree days above 10 °C for the day (>= 0). No upper cap.
    """
    avg = (tmax_c + tmin_c) / 2
    return max(0.0, avg - BASE_TEMP_C)


def correction_factor(tmax_c: float) -> float:
    """eGDD heat-stress multiplier in [0, 1] for a day's maximum temperature."""
    if tmax_c <= EGDD_LINEAR_START_C:
        m = 1.0
    elif tmax_c <= EGDD_QUAD_START_C:
        m = 1.0 - EGDD_LINEAR_SLOPE * (tmax_c - EGDD_LINEAR_START_C)
    else:
        at_quad_start = 1.0 - EGDD_LINEAR_SLOPE * (EGDD_QUAD_START_C - EGDD_LINEAR_START_C)
        m = at_quad_start - EGDD_QUAD_K * (tmax_c - EGDD_QUAD_START_C) ** 2
    return min(1.0, max(0.0, m))


def effective(tmin_c: float, tmax_c: float) -> float:
    """Compute effective GDD (eGDD) for a single day.

    Args:
        tmin_c: Daily minimum temperature in Celsius.
        tmax_c: Daily maximum temperature in Celsius.

    Returns:
        Classic degree days attenuated for heat above 30 °C (>= 0).
    """
    return classic_base10(tmin_c, tmax_c) * correction_factor(tmax_c)


def daily_heat(tmin_c: float, tmax_c: float, method: GDDMethod) -> float:
    """Dispatch to the selected model; the result is clamped to >= 0.

    Raises:
        ValueError: If ``method`` is not a known model.
    """
    if method == GDDMethod.CLASSIC_BASE10:
        value = classic_base10(tmin_c, tmax_c)
    elif method == GDDMethod.EFFECTIVE:
        value = effective(tmin_c, tmax_c)
    else:
        msg = f"Unknown GDD method: {method!r}"
        raise ValueError(msg)
    return max(0.0, value)


def cumulative_series(daily: Iterable[HeatPoint]) -> list[HeatPoint]:
    """Running sum of a daily series, one output point per input point."""
    results: list[HeatPoint] = []
    accumulated = 0.0
    for point in daily:
        accumulated += point.value
        results.append(HeatPoint(day=point.day, value=accumulated))
    return results
