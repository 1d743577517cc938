"""Diary entries and vineyard settings stored as JSON files.

The analytics only read from here. Weather flows in two ways: the refresh pass
run after a backfill copies cached observations onto the entries they belong
to, and ``attach_weather`` fills a single missing day on demand.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests
from pydantic import TypeAdapter, ValidationError

from vineyard_diary.datasources.weather import daily as weather_daily
from vineyard_diary.schemas import DiaryEntry, VineyardSettings

if TYPE_CHECKING:
    from pathlib import Path

    from vineyard_diary.schemas import DailyObservation
    from vineyard_diary.store import WeatherCache

logger = logging.getLogger(__name__)

_ENTRIES_ADAPTER: TypeAdapter[list[DiaryEntry]] = TypeAdapter(list[DiaryEntry])


class DiaryStore:
    """Holds diary entries and settings loaded from ``diary_path`` / ``settings_path``."""

    def __init__(self, diary_path: Path, settings_path: Path) -> None:
        self.diary_path = diary_path
        self.settings_path = settings_path
        self.entries: list[DiaryEntry] = []
        self.settings = VineyardSettings()

    def load(self) -> None:
        """Load entries and settings. Missing or malformed files yield empty defaults."""
        self.entries = self._load_entries()
        self.settings = self._load_settings()

    def _load_entries(self) -> list[DiaryEntry]:
        if not self.diary_path.exists():
            return []
        try:
            entries = _ENTRIES_ADAPTER.validate_json(self.diary_path.read_bytes())
        except (OSError, ValidationError) as exc:
            logger.warning("Could not load diary from %s: %s", self.diary_path, exc)
            return []
        entries.sort(key=lambda e: e.date)
        return entries

    def _load_settings(self) -> VineyardSettings:
        if not self.settings_path.exists():
            return VineyardSettings()
        try:
            return VineyardSettings.model_validate_json(self.settings_path.read_bytes())
        except (OSError, ValidationError) as exc:
            logger.warning("Could not load settings from %s: %s", self.settings_path, exc)
            return VineyardSettings()

    def save(self) -> bool:
        """Write entries back to ``diary_path``. Logs and returns False on I/O failure."""
        try:
            self.diary_path.parent.mkdir(parents=True, exist_ok=True)
            self.diary_path.write_bytes(_ENTRIES_ADAPTER.dump_json(self.entries, indent=2))
        except OSError:
            logger.exception("Failed to save diary to %s", self.diary_path)
            return False
        return True

    def refresh_entries_weather(self, cache: WeatherCache) -> int:
        """Copy cached weather onto each entry for its (block, day).

        Saves once if anything changed. Returns the number of entries updated.
        """
        changed = 0
        for i, entry in enumerate(self.entries):
            obs = cache.get(entry.block, entry.date)
            if obs is None:
                continue
            current = (
                entry.weather_min,
                entry.weather_max,
                entry.sunshine_hours,
                entry.precipitation_mm,
            )
            fresh = (obs.temp_min, obs.temp_max, obs.sunshine_hours, obs.precipitation_mm)
            if current == fresh:
                continue
            self.entries[i] = entry.model_copy(
                update={
                    "weather_min": obs.temp_min,
                    "weather_max": obs.temp_max,
                    "sunshine_hours": obs.sunshine_hours,
                    "precipitation_mm": obs.precipitation_mm,
                }
            )
            changed += 1

        if changed:
            self.save()
        return changed

    def attach_weather(
        self,
        entry: DiaryEntry,
        cache: WeatherCache,
        *,
        timeout: float | None = None,
    ) -> DailyObservation | None:
        """Weather for one entry's (block, day), fetched and cached on a miss.

        A cache hit is returned as is. Otherwise the single day is fetched for
        the entry's block, upserted and the cache persisted.

        Returns:
            The observation, or None if the block has no coordinates, the
            fetch fails, or the upstream source has no data for the day.
        """
        cached = cache.get(entry.block, entry.date)
        if cached is not None:
            return cached

        block = next((b for b in self.settings.blocks if b.name == entry.block), None)
        if block is None or not block.has_coordinates:
            return None

        try:
            fetched = weather_daily.fetch_daily_range(
                block.latitude, block.longitude, entry.date, entry.date, timeout=timeout
            )
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Weather fetch for %s on %s failed: %s", entry.block, entry.date, exc)
            return None

        observation = next((o for o in fetched if o.day == entry.date), None)
        if observation is None:
            return None
        cache.upsert_one(entry.block, observation)
        cache.persist()
        return observation
