"""Phenological milestone detection from diary entries.

A milestone is the first day in a year on which a variety is recorded at or
beyond a stage code (bud-break >= 5, bloom >= 23, harvest >= 40).
"""

from __future__ import annotations

import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from vineyard_diary.schemas import DiaryEntry


def fold_name(name: str) -> str:
    """Case- and diacritic-insensitive form of a variety name."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold().strip()


def first_day_at_or_above(
    entries: Iterable[DiaryEntry],
    year: int,
    threshold: int,
    variety: str | None = None,
) -> date | None:
    """Earliest day in ``year`` with a recorded stage code >= ``threshold``.

    Args:
        entries: Diary entries to search.
        year: Calendar year.
        threshold: Minimum stage code.
        variety: Only consider this variety (empty or None matches any).

    Returns:
        The earliest qualifying day, or None if no entry qualifies.
    """
    wanted = fold_name(variety) if variety else None

    earliest: date | None = None
    for entry in entries:
        if entry.date.year != year:
            continue
        if earliest is not None and entry.date >= earliest:
            continue
        for item in entry.varieties:
            if wanted is not None and fold_name(item.variety_name) != wanted:
                continue
            code = item.stage.code
            if code is not None and code >= threshold:
                earliest = entry.date
                break
    return earliest
