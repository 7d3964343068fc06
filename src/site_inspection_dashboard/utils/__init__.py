"""Utility modules for logging, exceptions, and date handling."""

from .logger import setup_logging, get_logger
from .exceptions import (
    ProcessingError,
    InvalidInputError,
    UnknownSelectorError,
    ExportError,
)
from .dates import parse_manufacture_date, age_years, parse_timestamp

__all__ = [
    "setup_logging",
    "get_logger",
    "ProcessingError",
    "InvalidInputError",
    "UnknownSelectorError",
    "ExportError",
    "parse_manufacture_date",
    "age_years",
    "parse_timestamp",
]
