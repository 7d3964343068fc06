"""Parsing helpers for battery manufacturing dates and visit timestamps."""

from __future__ import annotations

import re
from datetime import date, datetime

from .logger import get_logger

logger = get_logger(__name__)

# Tried in order; the first pattern that matches decides the format.
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_MONTH_YEAR = re.compile(r"^(\d{2})/(\d{4})$")
_YEAR_ONLY = re.compile(r"^(\d{4})$")


def parse_manufacture_date(raw: str | None) -> date | None:
    """
    Parse a battery manufacturing date.

    Accepted formats are ``YYYY-MM-DD``, ``MM/YYYY`` and ``YYYY``. Month-only
    and year-only values resolve to the first day of the period.

    Args:
        raw: Date string as typed in the field form

    Returns:
        Parsed date, or None when the value is empty or unparseable
    """
    if not raw:
        return None

    text = str(raw).strip()

    try:
        match = _ISO_DATE.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return date(year, month, day)

        match = _MONTH_YEAR.match(text)
        if match:
            month, year = int(match.group(1)), int(match.group(2))
            return date(year, month, 1)

        match = _YEAR_ONLY.match(text)
        if match:
            return date(int(match.group(1)), 1, 1)
    except ValueError:
        # e.g. month 13 or day 31 in a 30-day month
        logger.debug(f"Out-of-range manufacture date: {text!r}")
        return None

    logger.debug(f"Unrecognised manufacture date format: {text!r}")
    return None


def age_years(raw: str | None, reference_year: int) -> int:
    """
    Age in whole years of a battery, counted against ``reference_year``.

    Unparseable or empty dates have age 0. The result is never negative.

    Args:
        raw: Manufacturing date string
        reference_year: Year the age is measured against

    Returns:
        Age in years
    """
    parsed = parse_manufacture_date(raw)
    if parsed is None:
        return 0
    return max(reference_year - parsed.year, 0)


def parse_timestamp(raw: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 visit timestamp (``Z`` suffix allowed)."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw

    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp: {raw!r}")
        return None
