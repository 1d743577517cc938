"""
Domain models for Vineyard Diary.

Pydantic models for weather observations, diary entries and vineyard settings.
These define the canonical schema - the weather client and the diary store
normalize their inputs to these.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def to_day(value: Any) -> Any:
    """Normalize datetimes to their local calendar day; leave other values to pydantic."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


# =============================================================================
# Weather
# =============================================================================


class DailyObservation(BaseModel):
    """One calendar day's weather for one location block."""

    model_config = ConfigDict(frozen=True)

    day: date
    temp_max: float | None = None
    temp_min: float | None = None
    sunshine_hours: float | None = Field(default=None, ge=0)
    precipitation_mm: float | None = Field(default=None, ge=0)

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value: Any) -> Any:
        return to_day(value)

    @property
    def iso_day(self) -> str:
        """Cache key for this observation (``yyyy-MM-dd``)."""
        return self.day.isoformat()

    @property
    def has_temperatures(self) -> bool:
        return self.temp_max is not None and self.temp_min is not None


# =============================================================================
# Phenology
# =============================================================================


class PhenologyStage(BaseModel):
    """A growth stage recorded in the diary, e.g. ``"23: Full bloom"``.

    ``code`` is None when the recorded text has no leading integer; such
    stages never take part in threshold comparisons.
    """

    model_config = ConfigDict(frozen=True)

    code: int | None = None
    label: str = ""

    @classmethod
    def parse(cls, text: str) -> PhenologyStage:
        """Parse the ``"<int>: <label>"`` encoding (a bare ``"23"`` is accepted)."""
        head, _sep, tail = text.partition(":")
        try:
            code = int(head.strip())
        except ValueError:
            return cls(code=None, label=text.strip())
        return cls(code=code, label=tail.strip())

    def encode(self) -> str:
        """Inverse of :meth:`parse`."""
        if self.code is None:
            return self.label
        if self.label:
            return f"{self.code}: {self.label}"
        return str(self.code)


class VarietyStageItem(BaseModel):
    """Stage observed for one grape variety within a diary entry."""

    variety_name: str = ""
    stage: PhenologyStage = Field(default_factory=PhenologyStage)

    @field_validator("stage", mode="before")
    @classmethod
    def parse_stage(cls, value: Any) -> Any:
        if isinstance(value, str):
            return PhenologyStage.parse(value)
        if isinstance(value, int):
            return PhenologyStage(code=value)
        return value

    @field_serializer("stage")
    def serialize_stage(self, stage: PhenologyStage) -> str:
        return stage.encode()


# =============================================================================
# Diary
# =============================================================================


class DiaryEntry(BaseModel):
    """A diary entry: work done on one block on one day."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    date: date
    block: str = ""
    varieties: list[VarietyStageItem] = Field(default_factory=list)

    is_spraying: bool = False
    work_notes: str = ""
    memo: str = ""

    # Weather copied from the cache by the backfill refresh pass
    weather_min: float | None = None
    weather_max: float | None = None
    sunshine_hours: float | None = None
    precipitation_mm: float | None = None

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, value: Any) -> Any:
        return to_day(value)


# =============================================================================
# Settings
# =============================================================================


class BlockSetting(BaseModel):
    """A named vineyard block, optionally geolocated."""

    name: str
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class StageSetting(BaseModel):
    """A stage code and its display label, e.g. ``23`` / ``"Full bloom"``."""

    code: int
    label: str

    def as_stage(self) -> PhenologyStage:
        return PhenologyStage(code=self.code, label=self.label)


class VineyardSettings(BaseModel):
    """User-maintained masters: blocks, varieties and stages."""

    blocks: list[BlockSetting] = Field(default_factory=list)
    varieties: list[str] = Field(default_factory=list)
    stages: list[StageSetting] = Field(default_factory=list)

    @property
    def block_names(self) -> list[str]:
        return [b.name for b in self.blocks]
