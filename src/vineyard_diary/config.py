"""Typed settings loader for Vineyard Diary."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vineyard_diary.exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_prefix="VINEYARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Vineyard Diary"
    app_env: Literal["dev", "prod"] = "dev"
    debug: bool = False

    data_dir: Path = Field(default=Path("./data"))
    weather_cache_file: str = "daily_weather.json"
    diary_file: str = "diary.json"
    settings_file: str = "settings.json"

    http_timeout_seconds: float = 30.0

    @field_validator("weather_cache_file", "diary_file", "settings_file")
    @classmethod
    def plain_file_name(cls, value: str) -> str:
        """File names are resolved under ``data_dir`` and may not contain directories."""
        if not value.strip() or Path(value).name != value:
            msg = f"must be a plain file name, got {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("http_timeout_seconds")
    @classmethod
    def positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @property
    def weather_cache_path(self) -> Path:
        """Location of the persisted weather cache snapshot."""
        return self.data_dir / self.weather_cache_file

    @property
    def diary_path(self) -> Path:
        return self.data_dir / self.diary_file

    @property
    def settings_path(self) -> Path:
        return self.data_dir / self.settings_file


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.

    Raises:
        ConfigError: If environment values fail validation.
    """
    try:
        return Settings()
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc
