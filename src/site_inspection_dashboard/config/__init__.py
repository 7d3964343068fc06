"""Configuration management for the site inspection dashboard."""

from .settings import settings, Settings
from .constants import (
    REGION_CODES,
    REFERENCE_YEAR,
    ASSUMED_LOAD_CURRENT_A,
    MAX_CABINETS,
    MAX_BATTERY_BANKS,
    MAX_AC_UNITS,
)

__all__ = [
    "settings",
    "Settings",
    "REGION_CODES",
    "REFERENCE_YEAR",
    "ASSUMED_LOAD_CURRENT_A",
    "MAX_CABINETS",
    "MAX_BATTERY_BANKS",
    "MAX_AC_UNITS",
]
