"""Statistics and risk classification for telecom site inspection dashboards."""

__version__ = "0.1.0"
