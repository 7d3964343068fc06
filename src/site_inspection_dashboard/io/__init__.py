"""I/O layer: report row ingestion and JSON files."""

from .record_adapter import normalize_row, normalize_rows
from .json_handler import load_records, load_json, save_json

__all__ = [
    "normalize_row",
    "normalize_rows",
    "load_records",
    "load_json",
    "save_json",
]
