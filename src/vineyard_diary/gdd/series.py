"""Accumulation window resolution and daily / cumulative series assembly.

Everything here is a pure function of (diary entries, weather cache, as-of
day). ``today`` is always passed in explicitly.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from vineyard_diary.gdd.compute import cumulative_series, daily_heat
from vineyard_diary.gdd.milestones import first_day_at_or_above
from vineyard_diary.gdd.models import (
    BUDBREAK_CODE,
    FIXED_START_DAY,
    FIXED_START_MONTH,
    HARVEST_CODE,
    AccumulationWindow,
    GDDMethod,
    HeatPoint,
    StartRule,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from vineyard_diary.schemas import DiaryEntry
    from vineyard_diary.store import WeatherCache

__all__ = ["cumulative_series", "daily_series", "fixed_start", "resolve_window"]


def fixed_start(year: int) -> date:
    """April 1 of ``year``."""
    return date(year, FIXED_START_MONTH, FIXED_START_DAY)


def resolve_window(
    entries: Sequence[DiaryEntry],
    year: int,
    rule: StartRule,
    variety: str | None = None,
    *,
    today: date,
) -> AccumulationWindow:
    """Resolve the accumulation window for a year.

    The end is the harvest day (stage >= 40) but never later than ``today``;
    without a harvest record it is ``today``. Under ``BUDBREAK_OR_FIXED`` a
    bud-break (stage >= 5) can only move the start earlier than April 1.
    """
    harvest = first_day_at_or_above(entries, year, HARVEST_CODE, variety)
    end = min(harvest or today, today)

    start = fixed_start(year)
    if rule == StartRule.BUDBREAK_OR_FIXED:
        budbreak = first_day_at_or_above(entries, year, BUDBREAK_CODE, variety)
        if budbreak is not None:
            start = min(budbreak, start)

    return AccumulationWindow(start=start, end=end)


def _blocks_by_day(entries: Sequence[DiaryEntry]) -> dict[date, str]:
    # First non-empty block logged on each day
    by_day: dict[date, str] = {}
    for entry in entries:
        if entry.block and entry.date not in by_day:
            by_day[entry.date] = entry.block
    return by_day


def daily_series(
    entries: Sequence[DiaryEntry],
    cache: WeatherCache,
    year: int,
    *,
    today: date,
    block: str | None = None,
    variety: str | None = None,
    method: GDDMethod = GDDMethod.CLASSIC_BASE10,
    rule: StartRule = StartRule.FIXED,
    block_names: Sequence[str] = (),
) -> list[HeatPoint]:
    """Daily heat series over the resolved window, one point per day.

    Without an explicit ``block``, each day's weather is taken from the block
    a diary entry was logged on that day, falling back to the first configured
    block. Days with no cached temperatures contribute 0.

    Args:
        entries: Diary entries (read only).
        cache: Weather cache (read only).
        year: Calendar year.
        today: As-of day; the window never extends past it.
        block: Weather block to use for every day (empty or None: follow the diary).
        variety: Variety used for milestone detection (None: any variety).
        method: Heat accumulation model.
        rule: Start-of-window rule.
        block_names: Configured blocks, in order.

    Returns:
        Points from window start to end inclusive; empty if the window is empty.
    """
    window = resolve_window(entries, year, rule, variety, today=today)
    if window.is_empty:
        return []

    day_blocks = {} if block else _blocks_by_day(entries)
    default_block = block_names[0] if block_names else ""

    points: list[HeatPoint] = []
    for day in window.days():
        day_block = block or day_blocks.get(day, default_block)
        obs = cache.get(day_block, day)
        if obs is not None and obs.has_temperatures:
            value = daily_heat(obs.temp_min, obs.temp_max, method)  # type: ignore[arg-type]
        else:
            value = 0.0
        points.append(HeatPoint(day=day, value=value))
    return points
