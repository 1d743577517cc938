"""Cross-datasource joins over the weather cache and the diary.

Dependency rule: analysis/ reads the cache and diary models only. It never
fetches data and never mutates the cache.

Modules:
  - weather_stats: per-block weather metric series, cumulative sunshine since
    bloom per variety, years with data
"""

from vineyard_diary.analysis.weather_stats import (
    WeatherMetric,
    available_years,
    bloom_day,
    cumulative_sunshine_since_bloom,
    metric_series,
    varieties_logged,
)

__all__ = [
    "WeatherMetric",
    "available_years",
    "bloom_day",
    "cumulative_sunshine_since_bloom",
    "metric_series",
    "varieties_logged",
]
