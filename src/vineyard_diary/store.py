"""Weather cache keyed by (block, day), persisted as a JSON snapshot.

Layout of the snapshot file::

    {
      "<block name>": {
        "2024-04-01": {"day": "2024-04-01", "temp_max": 18.2, ...},
        ...
      }
    }

Keys are sorted and indented so repeated persists of unchanged data are
byte-identical. Persistence is best-effort: ``persist()`` and ``reload()``
log failures and report them through their return value, and the in-memory
mapping stays authoritative for the running process.

Mutations defer persistence (callers persist once per batch) except
``replace_all()``, which persists immediately.
"""

from __future__ import annotations

import contextlib
import json
import logging
import threading
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from vineyard_diary.exceptions import SnapshotError
from vineyard_diary.schemas import DailyObservation, to_day

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

#: Persisted form: block name -> ISO day -> observation
Snapshot = dict[str, dict[str, DailyObservation]]

_SNAPSHOT_ADAPTER: TypeAdapter[Snapshot] = TypeAdapter(Snapshot)


class WeatherCache:
    """In-process weather cache with a JSON snapshot on disk.

    Mutating methods are serialized with a lock. Reads need no coordination
    once a batch of mutations has completed.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.dirty = False
        self._data: dict[str, dict[date, DailyObservation]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return sum(len(by_day) for by_day in self._data.values())

    # -- reads ---------------------------------------------------------------

    def get(self, block: str, day: date | datetime) -> DailyObservation | None:
        """Exact lookup after normalizing ``day``; None on a miss."""
        by_day = self._data.get(block)
        if by_day is None:
            return None
        return by_day.get(to_day(day))

    def blocks(self) -> list[str]:
        return sorted(self._data)

    def all_for_block(self, block: str) -> list[DailyObservation]:
        """All observations for a block, ascending by day."""
        by_day = self._data.get(block, {})
        return [by_day[day] for day in sorted(by_day)]

    def snapshot(self) -> Snapshot:
        """Copy of the full mapping in persisted (ISO-keyed) form."""
        with self._lock:
            return {
                block: {day.isoformat(): obs for day, obs in by_day.items()}
                for block, by_day in self._data.items()
            }

    # -- mutations -----------------------------------------------------------

    def upsert_one(self, block: str, observation: DailyObservation) -> None:
        """Insert or overwrite the entry for ``(block, observation.day)``."""
        with self._lock:
            self._data.setdefault(block, {})[observation.day] = observation
            self.dirty = True

    def upsert_many(self, block: str, observations: Iterable[DailyObservation]) -> None:
        """Upsert each observation under its own day. Empty input is a no-op."""
        items = list(observations)
        if not items:
            return
        with self._lock:
            for obs in items:
                self.upsert_one(block, obs)

    def update_fields(
        self,
        block: str,
        day: date | datetime,
        *,
        temp_max: float | None = None,
        temp_min: float | None = None,
        sunshine_hours: float | None = None,
        precipitation_mm: float | None = None,
    ) -> DailyObservation:
        """Overwrite only the supplied fields, creating the day if needed."""
        day = to_day(day)
        changes = {
            key: value
            for key, value in (
                ("temp_max", temp_max),
                ("temp_min", temp_min),
                ("sunshine_hours", sunshine_hours),
                ("precipitation_mm", precipitation_mm),
            )
            if value is not None
        }
        with self._lock:
            current = self.get(block, day) or DailyObservation(day=day)
            updated = DailyObservation.model_validate({**current.model_dump(), **changes})
            self.upsert_one(block, updated)
        return updated

    def replace_all(self, snapshot: Mapping[str, Mapping[str, Any]]) -> bool:
        """Discard all data, install ``snapshot`` and persist immediately.

        Observations are keyed by their own ``day``. Returns the persist status.

        Raises:
            pydantic.ValidationError: If ``snapshot`` holds invalid observations.
        """
        validated = _SNAPSHOT_ADAPTER.validate_python(snapshot)
        with self._lock:
            self._data = _index(validated)
            self.dirty = True
            return self.persist()

    def clear(self) -> None:
        """Drop every observation (in memory only)."""
        with self._lock:
            self._data = {}
            self.dirty = True

    # -- persistence ---------------------------------------------------------

    def to_json(self) -> str:
        """Serialize the cache in its stable, sorted-key form."""
        payload = {
            block: {key: obs.model_dump(mode="json") for key, obs in by_day.items()}
            for block, by_day in self.snapshot().items()
        }
        return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    def persist(self) -> bool:
        """Write the snapshot atomically. Logs and returns False on I/O failure."""
        with self._lock:
            text = self.to_json()
            tmp = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(text, encoding="utf-8")
                tmp.replace(self.path)
            except OSError:
                logger.exception("Failed to persist weather cache to %s", self.path)
                with contextlib.suppress(OSError):
                    tmp.unlink(missing_ok=True)
                return False
            self.dirty = False
        logger.debug("Persisted %d observations to %s", len(self), self.path)
        return True

    def reload(self) -> bool:
        """Load the snapshot from disk.

        A missing, unreadable or malformed file leaves an empty cache. Returns
        True only when a snapshot was loaded.
        """
        try:
            loaded = load_snapshot_file(self.path)
        except FileNotFoundError:
            logger.info("No weather cache at %s, starting empty", self.path)
            loaded = None
        except (OSError, SnapshotError) as exc:
            logger.warning("Discarding weather cache at %s: %s", self.path, exc)
            loaded = None

        with self._lock:
            self._data = _index(loaded) if loaded is not None else {}
            self.dirty = False
        return loaded is not None


def _index(snapshot: Snapshot) -> dict[str, dict[date, DailyObservation]]:
    return {
        block: {obs.day: obs for obs in by_day.values()} for block, by_day in snapshot.items()
    }


def load_snapshot_file(path: Path) -> Snapshot:
    """Read and validate a snapshot file (cache file or backup copy).

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        OSError: If the file cannot be read.
        SnapshotError: If the content is not a valid snapshot.
    """
    raw = path.read_bytes()
    try:
        return _SNAPSHOT_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        msg = f"{path} is not a valid weather snapshot ({exc.error_count()} errors)"
        raise SnapshotError(msg) from exc
