"""Daily weather for an inclusive date range from the Open-Meteo APIs.

Past days come from the archive API; today and later from the forecast API.
A range that spans today is split across both and merged back into one
ascending list with a single observation per day.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from vineyard_diary.datasources.weather.client import (
    DAILY_VARS,
    OPEN_METEO_API,
    OPEN_METEO_HISTORICAL,
    SECONDS_PER_HOUR,
    TIMEZONE,
)
from vineyard_diary.schemas import DailyObservation
from vineyard_diary.services.http import session


def _value_at(values: list[Any], i: int) -> Any:
    return values[i] if i < len(values) else None


def parse_daily_response(data: dict[str, Any]) -> list[DailyObservation]:
    """
    Convert an Open-Meteo ``daily`` payload into observations.

    Days where every variable is null are dropped, so the cache keeps no entry
    for them. ``sunshine_duration`` arrives in seconds and is stored in hours.

    Args:
        data: Raw API response dict.

    Returns:
        Observations in ascending day order.
    """
    daily = data.get("daily") or {}
    dates = daily.get("time", [])
    tmax_values = daily.get("temperature_2m_max") or []
    tmin_values = daily.get("temperature_2m_min") or []
    precip_values = daily.get("precipitation_sum") or []
    sunshine_values = daily.get("sunshine_duration") or []

    results: list[DailyObservation] = []
    for i, date_str in enumerate(dates):
        tmax = _value_at(tmax_values, i)
        tmin = _value_at(tmin_values, i)
        precip = _value_at(precip_values, i)
        sunshine_s = _value_at(sunshine_values, i)
        if tmax is None and tmin is None and precip is None and sunshine_s is None:
            continue

        results.append(
            DailyObservation(
                day=date.fromisoformat(date_str),
                temp_max=tmax,
                temp_min=tmin,
                sunshine_hours=sunshine_s / SECONDS_PER_HOUR if sunshine_s is not None else None,
                precipitation_mm=precip,
            )
        )

    results.sort(key=lambda obs: obs.day)
    return results


def _fetch_endpoint(
    url: str, lat: float, lon: float, start: date, end: date, timeout: float | None
) -> list[DailyObservation]:
    if start > end:
        return []

    params: dict[str, Any] = {
        "latitude": lat,
        "longitude": lon,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "daily": DAILY_VARS,
        "timezone": TIMEZONE,
        "temperature_unit": "celsius",
    }
    resp = session.get(url, params=params, timeout=timeout)
    resp.raise_for_status()
    result: dict[str, Any] = resp.json()
    return parse_daily_response(result)


def fetch_daily_range(
    lat: float,
    lon: float,
    start: date,
    end: date,
    *,
    today: date | None = None,
    timeout: float | None = None,
) -> list[DailyObservation]:
    """
    Fetch daily observations for a location and an inclusive date range.

    Args:
        lat: Latitude of the block.
        lon: Longitude of the block.
        start: First day (inclusive).
        end: Last day (inclusive).
        today: Day that separates archive from forecast data (default: today).
        timeout: Per-request timeout in seconds (default: the session default).

    Returns:
        Observations in ascending day order, at most one per day.

    Raises:
        requests.HTTPError: If an API request fails.
    """
    if end < start:
        return []
    today = today or date.today()

    chunks: list[tuple[str, date, date]] = []
    if end < today:
        chunks.append((OPEN_METEO_HISTORICAL, start, end))
    elif start >= today:
        chunks.append((OPEN_METEO_API, start, end))
    else:
        chunks.append((OPEN_METEO_HISTORICAL, start, today - timedelta(days=1)))
        chunks.append((OPEN_METEO_API, today, end))

    by_day: dict[date, DailyObservation] = {}
    for url, chunk_start, chunk_end in chunks:
        for obs in _fetch_endpoint(url, lat, lon, chunk_start, chunk_end, timeout):
            by_day[obs.day] = obs

    return [by_day[day] for day in sorted(by_day)]
