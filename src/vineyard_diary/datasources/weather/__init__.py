"""Open-Meteo daily weather data source.

Fetches daily max/min temperature, precipitation and sunshine for a location
and an inclusive date range (free, no API key).

Public API:
  - daily: fetch_daily_range, parse_daily_response
  - client: API URLs, shared constants
"""

from vineyard_diary.datasources.weather.client import (
    DAILY_VARS,
    OPEN_METEO_API,
    OPEN_METEO_HISTORICAL,
)
from vineyard_diary.datasources.weather.daily import fetch_daily_range, parse_daily_response

__all__ = [
    "DAILY_VARS",
    "OPEN_METEO_API",
    "OPEN_METEO_HISTORICAL",
    "fetch_daily_range",
    "parse_daily_response",
]
