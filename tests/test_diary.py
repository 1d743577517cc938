"""Tests for the diary store."""

from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import requests

from vineyard_diary.diary import DiaryStore
from vineyard_diary.schemas import BlockSetting, DailyObservation, DiaryEntry, VineyardSettings
from vineyard_diary.store import WeatherCache

if TYPE_CHECKING:
    from pathlib import Path

    import pytest


def write_diary(path: Path, entries: list[dict[str, object]]) -> None:
    path.write_text(json.dumps(entries))


class TestDiaryStoreLoad:
    """Test loading entries and settings."""

    def test_missing_files_give_defaults(self, tmp_path: Path) -> None:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()
        assert store.entries == []
        assert store.settings.blocks == []

    def test_loads_and_sorts_entries(self, tmp_path: Path) -> None:
        write_diary(
            tmp_path / "diary.json",
            [
                {"date": "2024-05-02", "block": "North", "varieties": []},
                {
                    "date": "2024-04-10",
                    "block": "North",
                    "varieties": [{"variety_name": "Merlot", "stage": "5: Bud-break"}],
                },
            ],
        )
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()

        assert [e.date for e in store.entries] == [date(2024, 4, 10), date(2024, 5, 2)]
        assert store.entries[0].varieties[0].stage.code == 5

    def test_loads_settings(self, tmp_path: Path) -> None:
        (tmp_path / "settings.json").write_text(
            json.dumps(
                {
                    "blocks": [{"name": "North", "latitude": 45.1, "longitude": 7.2}],
                    "varieties": ["Merlot"],
                    "stages": [{"code": 23, "label": "Full bloom"}],
                }
            )
        )
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()

        assert store.settings.block_names == ["North"]
        assert store.settings.blocks[0].has_coordinates
        assert store.settings.varieties == ["Merlot"]

    def test_malformed_diary_gives_empty(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        (tmp_path / "diary.json").write_text("[{broken")
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()
        assert store.entries == []
        assert "Could not load diary" in caplog.text

    def test_malformed_settings_gives_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "settings.json").write_text(json.dumps({"blocks": [{"latitude": 200}]}))
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()
        assert store.settings.blocks == []


class TestDiaryStoreSave:
    """Test writing entries back."""

    def test_save_roundtrip(self, tmp_path: Path) -> None:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.entries = [DiaryEntry(date=date(2024, 4, 1), block="North", memo="first cut")]
        assert store.save() is True

        fresh = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        fresh.load()
        assert fresh.entries == store.entries

    def test_save_writes_stage_text(self, tmp_path: Path) -> None:
        write_diary(
            tmp_path / "diary.json",
            [
                {
                    "date": "2024-06-01",
                    "block": "North",
                    "varieties": [{"variety_name": "Merlot", "stage": "23: Full bloom"}],
                }
            ],
        )
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.load()
        store.save()

        data = json.loads((tmp_path / "diary.json").read_text())
        assert data[0]["varieties"][0]["stage"] == "23: Full bloom"


class TestRefreshEntriesWeather:
    """Test copying cached weather onto diary entries."""

    def test_copies_matching_observation(self, tmp_path: Path) -> None:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.entries = [
            DiaryEntry(date=date(2024, 4, 1), block="North"),
            DiaryEntry(date=date(2024, 4, 2), block="South"),
        ]
        cache = WeatherCache(tmp_path / "weather.json")
        cache.upsert_one(
            "North",
            DailyObservation(
                day=date(2024, 4, 1),
                temp_max=18.0,
                temp_min=6.0,
                sunshine_hours=7.0,
                precipitation_mm=0.4,
            ),
        )

        changed = store.refresh_entries_weather(cache)

        assert changed == 1
        entry = store.entries[0]
        assert (entry.weather_min, entry.weather_max) == (6.0, 18.0)
        assert entry.sunshine_hours == 7.0
        assert entry.precipitation_mm == 0.4
        assert store.entries[1].weather_max is None
        assert (tmp_path / "diary.json").exists()

    def test_unchanged_entries_not_saved(self, tmp_path: Path) -> None:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.entries = [DiaryEntry(date=date(2024, 4, 1), block="North")]
        cache = WeatherCache(tmp_path / "weather.json")

        assert store.refresh_entries_weather(cache) == 0
        assert not (tmp_path / "diary.json").exists()

    def test_second_refresh_is_noop(self, tmp_path: Path) -> None:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.entries = [DiaryEntry(date=date(2024, 4, 1), block="North")]
        cache = WeatherCache(tmp_path / "weather.json")
        cache.upsert_one("North", DailyObservation(day=date(2024, 4, 1), temp_max=18.0))

        assert store.refresh_entries_weather(cache) == 1
        assert store.refresh_entries_weather(cache) == 0


class TestAttachWeather:
    """Test single-day weather lookup with fetch on a cache miss."""

    @staticmethod
    def make_store(tmp_path: Path) -> DiaryStore:
        store = DiaryStore(tmp_path / "diary.json", tmp_path / "settings.json")
        store.settings = VineyardSettings(
            blocks=[
                BlockSetting(name="North", latitude=45.0, longitude=7.0),
                BlockSetting(name="Cellar"),
            ]
        )
        return store

    @patch("vineyard_diary.diary.weather_daily.fetch_daily_range")
    def test_cache_hit_skips_fetch(self, mock_fetch: Mock, tmp_path: Path) -> None:
        store = self.make_store(tmp_path)
        cache = WeatherCache(tmp_path / "weather.json")
        cached = DailyObservation(day=date(2024, 4, 1), temp_max=18.0)
        cache.upsert_one("North", cached)

        result = store.attach_weather(DiaryEntry(date=date(2024, 4, 1), block="North"), cache)

        assert result == cached
        mock_fetch.assert_not_called()

    @patch("vineyard_diary.diary.weather_daily.fetch_daily_range")
    def test_miss_fetches_one_day_and_persists(self, mock_fetch: Mock, tmp_path: Path) -> None:
        store = self.make_store(tmp_path)
        cache = WeatherCache(tmp_path / "weather.json")
        fetched = DailyObservation(day=date(2024, 4, 1), temp_max=18.0, temp_min=6.0)
        mock_fetch.return_value = [fetched]

        result = store.attach_weather(DiaryEntry(date=date(2024, 4, 1), block="North"), cache)

        assert result == fetched
        mock_fetch.assert_called_once_with(
            45.0, 7.0, date(2024, 4, 1), date(2024, 4, 1), timeout=None
        )
        assert cache.get("North", date(2024, 4, 1)) == fetched
        saved = json.loads((tmp_path / "weather.json").read_text())
        assert saved["North"]["2024-04-01"]["temp_max"] == 18.0

    @patch("vineyard_diary.diary.weather_daily.fetch_daily_range")
    def test_block_without_coordinates(self, mock_fetch: Mock, tmp_path: Path) -> None:
        store = self.make_store(tmp_path)
        cache = WeatherCache(tmp_path / "weather.json")

        for block in ("Cellar", "Unknown"):
            entry = DiaryEntry(date=date(2024, 4, 1), block=block)
            assert store.attach_weather(entry, cache) is None
        mock_fetch.assert_not_called()

    @patch("vineyard_diary.diary.weather_daily.fetch_daily_range")
    def test_fetch_failure_returns_none(self, mock_fetch: Mock, tmp_path: Path) -> None:
        store = self.make_store(tmp_path)
        cache = WeatherCache(tmp_path / "weather.json")
        mock_fetch.side_effect = requests.ConnectionError("offline")

        assert store.attach_weather(DiaryEntry(date=date(2024, 4, 1), block="North"), cache) is None
        assert len(cache) == 0

    @patch("vineyard_diary.diary.weather_daily.fetch_daily_range")
    def test_no_upstream_data(self, mock_fetch: Mock, tmp_path: Path) -> None:
        store = self.make_store(tmp_path)
        cache = WeatherCache(tmp_path / "weather.json")
        mock_fetch.return_value = []

        assert store.attach_weather(DiaryEntry(date=date(2024, 4, 1), block="North"), cache) is None
        assert not (tmp_path / "weather.json").exists()
