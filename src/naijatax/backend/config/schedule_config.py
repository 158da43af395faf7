"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    BracketSchedule,
    CategoryConfig,
    CategoryLabels,
    ConfigurationError,
    InvalidSchedule,
    ScheduleConfiguration,
    ScheduleManifest,
    ScheduleManifestEntry,
    ScheduleMeta,
    TaxBracket,
    build_schedule,
    raise_configuration_error,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> ScheduleManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return ScheduleManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[ScheduleManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


@lru_cache(maxsize=8)
def load_schedule_configuration(year: int) -> ScheduleConfiguration:
    """Load the bracket schedules for the specified version from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Schedule for year {year} not declared in manifest") from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Schedule file for year {year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    try:
        configuration = ScheduleConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise_configuration_error(error, f"Configuration validation failed for {year}")

    if configuration.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {configuration.year}"
        )

    return configuration


def available_years() -> Sequence[int]:
    """Return the schedule versions declared in the manifest."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the most recent declared schedule version."""

    years = available_years()
    if not years:
        raise ConfigurationError("Configuration manifest declares no schedule versions")
    return years[-1]


__all__ = [
    "BracketSchedule",
    "CONFIG_DIRECTORY",
    "CategoryConfig",
    "CategoryLabels",
    "ConfigurationError",
    "InvalidSchedule",
    "MANIFEST_FILE",
    "ScheduleConfiguration",
    "ScheduleManifest",
    "ScheduleManifestEntry",
    "ScheduleMeta",
    "TaxBracket",
    "available_years",
    "build_schedule",
    "default_year",
    "load_manifest",
    "load_schedule_configuration",
    "manifest_entries",
]
