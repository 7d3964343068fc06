"""Export of statistics and drill-down tables."""

from .metrics_exporter import drilldown_rows, export_drilldown_csv, export_stats_json

__all__ = [
    "drilldown_rows",
    "export_drilldown_csv",
    "export_stats_json",
]
