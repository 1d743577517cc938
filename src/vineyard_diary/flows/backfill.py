"""
Prefect flow that backfills the weather cache for every configured block.

One fetch per geolocated block is submitted concurrently. A block whose fetch
fails is logged and skipped for this run; the others are still applied. After
all fetches settle the cache is persisted once and the diary entries are
refreshed once.

Run locally:
    python -m vineyard_diary.flows.backfill
"""

from __future__ import annotations

from datetime import date
from typing import Any

import requests
from prefect import flow, task

from vineyard_diary.config import get_settings
from vineyard_diary.datasources.weather import daily as weather_daily
from vineyard_diary.diary import DiaryStore
from vineyard_diary.schemas import DailyObservation
from vineyard_diary.store import WeatherCache

# Overridable in tests; built from settings when left as None
cache: WeatherCache | None = None
diary: DiaryStore | None = None


def _sources() -> tuple[WeatherCache, DiaryStore]:
    if cache is not None and diary is not None:
        return cache, diary
    settings = get_settings()
    weather_cache = cache if cache is not None else WeatherCache(settings.weather_cache_path)
    diary_store = (
        diary if diary is not None else DiaryStore(settings.diary_path, settings.settings_path)
    )
    return weather_cache, diary_store


@task(name="fetch-block-weather")
def fetch_block_weather(
    block: str,
    lat: float,
    lon: float,
    start: date,
    end: date,
    timeout: float | None = None,
) -> list[DailyObservation] | None:
    """Fetch one block's daily weather; returns None if the fetch fails."""
    try:
        return weather_daily.fetch_daily_range(lat, lon, start, end, today=end, timeout=timeout)
    except (requests.RequestException, ValueError) as exc:
        print(f"Backfill failed for block {block!r}: {exc}")
        return None


def apply_batches(
    target: WeatherCache, batches: dict[str, list[DailyObservation]]
) -> int:
    """Upsert every fetched batch into ``target``; returns observations applied."""
    applied = 0
    for block, observations in batches.items():
        target.upsert_many(block, observations)
        applied += len(observations)
    return applied


@flow(name="backfill-weather", log_prints=True)
def backfill_weather(
    today: date | None = None, timeout: float | None = None
) -> dict[str, Any]:
    """
    Fetch Jan 1 .. today for each geolocated block and update the cache.

    Args:
        today: Last day to fetch (default: today).
        timeout: HTTP timeout per request (default: the session default).

    Returns:
        Summary counts for the run.
    """
    today = today or date.today()
    start = date(today.year, 1, 1)

    weather_cache, diary_store = _sources()
    if not weather_cache.dirty:
        weather_cache.reload()
    diary_store.load()

    blocks = [b for b in diary_store.settings.blocks if b.has_coordinates]
    skipped = len(diary_store.settings.blocks) - len(blocks)
    if skipped:
        print(f"Skipping {skipped} block(s) without coordinates.")

    futures = {
        b.name: fetch_block_weather.submit(
            b.name, b.latitude, b.longitude, start, today, timeout
        )
        for b in blocks
    }

    batches: dict[str, list[DailyObservation]] = {}
    for name, future in futures.items():
        future.wait()
        if not future.state.is_completed():
            # Unexpected task error: count the block as failed, keep the others
            print(f"Backfill task for block {name!r} ended {future.state.name}: skipped.")
            continue
        result = future.result()
        if result is not None:
            batches[name] = result

    applied = apply_batches(weather_cache, batches)
    persisted = weather_cache.persist()
    refreshed = diary_store.refresh_entries_weather(weather_cache)

    print(
        f"Backfilled {applied} observations for {len(batches)}/{len(blocks)} blocks "
        f"({start.isoformat()}..{today.isoformat()}); refreshed {refreshed} entries."
    )

    return {
        "blocks_requested": len(blocks),
        "blocks_fetched": len(batches),
        "blocks_failed": len(blocks) - len(batches),
        "observations": applied,
        "entries_refreshed": refreshed,
        "persisted": persisted,
    }


if __name__ == "__main__":
    result = backfill_weather()
    print(f"Flow complete: {result}")
