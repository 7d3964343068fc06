"""Structured logging configuration."""

import logging
import sys
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "site-inspection-dashboard"

# JSON keys emitted instead of the logging attribute names
JSON_FIELD_NAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger"}


def setup_logging(log_level: str = "INFO", json_format: bool = True, service: str = SERVICE_NAME) -> None:
    """
    Configure the root logger for a dashboard run.

    Handlers installed by earlier calls are replaced, so the function can be
    called once per run (or per test) without duplicating output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, emit one JSON object per line with a ``service`` field
        service: Value of the ``service`` field in JSON lines
    """
    level = log_level.upper()
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if json_format:
        formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
            rename_fields=JSON_FIELD_NAMES,
            static_fields={"service": service},
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )

    handler.setFormatter(formatter)
    root.addHandler(handler)

    # Library warnings (pydantic deprecations, etc.) go through the same handler
    logging.captureWarnings(True)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)
