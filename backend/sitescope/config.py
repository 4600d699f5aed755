"""Process settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings for the factories and the API."""

    valuation_tuning_path: Path | None = None
    planning_tables_path: Path | None = None
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)


def _optional_path(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    return Path(value) if value else None


def load_settings() -> Settings:
    """Read settings from ``SITESCOPE_*`` environment variables.

    Unset or blank variables keep their defaults.
    """
    origins = tuple(
        origin.strip()
        for origin in os.environ.get("SITESCOPE_CORS_ORIGINS", "").split(",")
        if origin.strip()
    )
    return Settings(
        valuation_tuning_path=_optional_path("SITESCOPE_VALUATION_TUNING"),
        planning_tables_path=_optional_path("SITESCOPE_PLANNING_TABLES"),
        log_level=os.environ.get("SITESCOPE_LOG_LEVEL", "").strip().upper() or "INFO",
        cors_origins=origins or DEFAULT_CORS_ORIGINS,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
