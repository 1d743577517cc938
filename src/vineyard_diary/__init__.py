"""Vineyard Diary - phenology and weather analytics for a vineyard diary.

Architecture::

    datasources/   External APIs (Open-Meteo daily weather)
    store.py       Weather cache keyed by (block, day), persisted as JSON
    diary.py       Diary entries and block/variety/stage settings (JSON files)
    gdd/           Pure GDD / eGDD computation, milestones, windows, series
    analysis/      Cross-datasource logic (weather metrics, sunshine since bloom)
    flows/         Prefect orchestration (weather backfill)
    services/      Shared utilities (HTTP client with retry)

Data flow: datasources → store (cache) → gdd / analysis → presentation
"""

__version__ = "0.1.0"

from vineyard_diary.config import Settings, get_settings

__all__ = ["Settings", "__version__", "get_settings"]
