"""JSON file handling utilities."""

import json
from pathlib import Path
from typing import Any

from ..models.inspection import InspectionRecord
from ..utils.logger import get_logger
from ..utils.exceptions import ExportError, InvalidInputError
from .record_adapter import normalize_rows

logger = get_logger(__name__)


def load_records(path: Path) -> list[InspectionRecord]:
    """
    Load flat report rows from a JSON file and normalize them.

    The file holds either a JSON array of rows or an object with a
    ``reports`` array (the shape of a paginated export).

    Args:
        path: Path to the reports JSON

    Returns:
        Normalized inspection records

    Raises:
        InvalidInputError: If the file is missing, unreadable or has the wrong shape
    """
    logger.info(f"Loading inspection reports from {path}")

    try:
        data = load_json(path)
    except IOError as e:
        raise InvalidInputError(str(e)) from e

    if isinstance(data, dict):
        data = data.get("reports")

    if not isinstance(data, list):
        error_msg = f"Expected a list of reports in {path}, got {type(data).__name__}"
        logger.error(error_msg)
        raise InvalidInputError(error_msg)

    records = normalize_rows(data)
    logger.info(f"Loaded {len(records)} inspection records")
    return records


def save_json(data: dict[str, Any] | list[Any], path: Path, indent: int = 2) -> None:
    """
    Save data to JSON file.

    Args:
        data: Data to save (dict or list)
        path: Output path
        indent: JSON indentation (default: 2)

    Raises:
        ExportError: If the file cannot be written
    """
    logger.info(f"Saving JSON to {path}")

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False, default=str)

        size_kb = path.stat().st_size / 1_000
        logger.info(f"Saved JSON: {size_kb:.1f} KB")
    except (OSError, TypeError) as e:
        error_msg = f"Failed to save JSON to {path}: {e}"
        logger.error(error_msg)
        raise ExportError(error_msg) from e


def load_json(path: Path) -> dict[str, Any] | list[Any]:
    """
    Load JSON file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON data
    """
    logger.debug(f"Loading JSON from {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        error_msg = f"Failed to load JSON from {path}: {e}"
        logger.error(error_msg)
        raise IOError(error_msg) from e
