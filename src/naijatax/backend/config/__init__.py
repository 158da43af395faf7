"""Bracket schedule configuration loading and validation."""

from .schedule_config import (
    ConfigurationError,
    InvalidSchedule,
    available_years,
    default_year,
    load_schedule_configuration,
)

__all__ = [
    "ConfigurationError",
    "InvalidSchedule",
    "available_years",
    "default_year",
    "load_schedule_configuration",
]
