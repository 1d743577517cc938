"""Weather statistics for one block and year.

Feeds the statistics charts: raw daily metrics from the cache, and the
running sunshine total each variety has received since it reached bloom.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from vineyard_diary.gdd.milestones import first_day_at_or_above, fold_name
from vineyard_diary.gdd.models import BLOOM_CODE, HeatPoint

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from vineyard_diary.schemas import DiaryEntry
    from vineyard_diary.store import WeatherCache


class WeatherMetric(StrEnum):
    """Observation fields that can be charted."""

    TEMP_MAX = "temp_max"
    TEMP_MIN = "temp_min"
    SUNSHINE_HOURS = "sunshine_hours"
    PRECIPITATION_MM = "precipitation_mm"


def metric_series(
    cache: WeatherCache,
    block: str,
    year: int,
    metric: WeatherMetric,
) -> list[tuple[date, float | None]]:
    """Cached values of one metric for a block and year, ascending by day."""
    return [
        (obs.day, getattr(obs, metric.value))
        for obs in cache.all_for_block(block)
        if obs.day.year == year
    ]


def _entries_for(entries: Sequence[DiaryEntry], block: str, year: int) -> list[DiaryEntry]:
    return [e for e in entries if e.block == block and e.date.year == year]


def varieties_logged(entries: Sequence[DiaryEntry], block: str, year: int) -> list[str]:
    """Sorted variety names recorded on a block during a year.

    Spellings that differ only in case or accents count as one variety; the
    first spelling seen is returned.
    """
    names: dict[str, str] = {}
    for entry in _entries_for(entries, block, year):
        for item in entry.varieties:
            if item.variety_name:
                names.setdefault(fold_name(item.variety_name), item.variety_name)
    return sorted(names.values())


def bloom_day(
    entries: Sequence[DiaryEntry], block: str, year: int, variety: str
) -> date | None:
    """First day a variety reached bloom (stage >= 23) on a block."""
    return first_day_at_or_above(_entries_for(entries, block, year), year, BLOOM_CODE, variety)


def cumulative_sunshine_since_bloom(
    entries: Sequence[DiaryEntry],
    cache: WeatherCache,
    block: str,
    year: int,
) -> dict[str, list[HeatPoint]]:
    """Running sunshine hours from each variety's bloom day over cached days.

    Varieties without a bloom record are left out. A cached day without a
    sunshine value adds nothing but still gets a point.

    Returns:
        Dict mapping variety name -> cumulative sunshine points.
    """
    observations = [obs for obs in cache.all_for_block(block) if obs.day.year == year]
    if not observations:
        return {}

    result: dict[str, list[HeatPoint]] = {}
    for variety in varieties_logged(entries, block, year):
        bloom = bloom_day(entries, block, year, variety)
        if bloom is None:
            continue

        total = 0.0
        points: list[HeatPoint] = []
        for obs in observations:
            if obs.day < bloom:
                continue
            total += obs.sunshine_hours or 0.0
            points.append(HeatPoint(day=obs.day, value=total))

        if points:
            result[variety] = points
    return result


def available_years(
    cache: WeatherCache,
    entries: Sequence[DiaryEntry],
    block: str,
    *,
    today: date,
) -> list[int]:
    """Years to offer for a block: cached weather years, else diary years, else this year."""
    years = {obs.day.year for obs in cache.all_for_block(block)}
    if not years:
        years = {e.date.year for e in entries if e.block == block}
    if not years:
        years = {today.year}
    return sorted(years)
