"""JSON serialization helpers for GDD series."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vineyard_diary.gdd.models import AccumulationWindow, HeatPoint


def series_to_dict(
    window: AccumulationWindow,
    daily: list[HeatPoint],
    cumulative: list[HeatPoint],
) -> dict[str, Any]:
    """Serialize a daily series and its running sum to a JSON-compatible dict.

    Args:
        window: The resolved accumulation window.
        daily: Daily heat points.
        cumulative: Running sum of ``daily`` (same length and order).

    Returns:
        Dict with window bounds, total, and one row per day.
    """
    return {
        "start": window.start.isoformat(),
        "end": window.end.isoformat(),
        "total": round(cumulative[-1].value, 1) if cumulative else 0.0,
        "daily": [
            {
                "date": d.day.isoformat(),
                "value": round(d.value, 1),
                "accumulated": round(c.value, 1),
            }
            for d, c in zip(daily, cumulative, strict=True)
        ],
    }
